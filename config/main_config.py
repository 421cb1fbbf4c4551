import os
from dotenv import load_dotenv


load_dotenv()

# MySQL
DB_HOST = os.getenv('DB_HOST', 'localhost')
DB_PORT = int(os.getenv('DB_PORT', '3306'))
DB_USER = os.getenv('DB_USER', 'user')
DB_PASSWORD = os.getenv('DB_PASSWORD', 'password')
DB_NAME = os.getenv('DB_NAME', 'songs')

# Redis
REDIS_HOST = os.getenv('REDIS_HOST', 'localhost')
REDIS_PORT = int(os.getenv('REDIS_PORT', '6379'))
REDIS_DB = int(os.getenv('REDIS_DB', '0'))
SONG_KEY_PREFIX = os.getenv('SONG_KEY_PREFIX', 'song:')

# Which backend RepoService builds when none is passed explicitly: 'sql' or 'redis'
SONG_BACKEND = os.getenv('SONG_BACKEND', 'sql')
# Seconds; empty means calls wait for the store as long as it takes
REPO_TIMEOUT = float(os.getenv('REPO_TIMEOUT')) if os.getenv('REPO_TIMEOUT') else None

LOG_FILE = os.getenv('LOG_FILE', 'app.log')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
