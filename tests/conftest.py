# tests/conftest.py - in-memory stand-ins for the aiomysql pool and the redis client
import re
from contextlib import asynccontextmanager

import pytest
from aiomysql import IntegrityError, OperationalError
from pymysql.constants.ER import DUP_ENTRY
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError

from infrastructure.aiomysql_config import MySQLPool
from infrastructure.redis_config import RedisPool
from infrastructure.repositories.song import sql_repo


SEED_SONGS = [
    {'id': str(i), 'name': f'Song {i}', 'composer': f'Composer {i}'} for i in range(1, 4)
]


# ========================================
# MySQL
# ========================================


class FakeDatabase:
    """Rows of the songs table keyed by id, plus what was executed against them."""

    def __init__(self):
        self.rows = {}
        self.statements = []
        self.schema_created = False
        self.unreachable = False
        self.commits = 0
        self.rollbacks = 0


class FakeCursor:
    def __init__(self, db: FakeDatabase, as_dict: bool):
        self.db = db
        self.as_dict = as_dict
        self.result = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    async def execute(self, statement, params=()):
        self.db.statements.append((statement, params))
        rows = self.db.rows
        self.result = []
        if statement == sql_repo.CREATE_TABLE:
            self.db.schema_created = True
            return 0
        if statement == sql_repo.SELECT_ALL:
            self.result = [dict(row) for row in rows.values()]
            return len(self.result)
        if statement == sql_repo.SELECT_BY_ID:
            song_id, = params
            self.result = [dict(rows[song_id])] if song_id in rows else []
            return len(self.result)
        if statement == sql_repo.INSERT:
            song_id, name, composer = params
            if song_id in rows:
                raise IntegrityError(DUP_ENTRY, f"Duplicate entry '{song_id}' for key 'PRIMARY'")
            rows[song_id] = {'id': song_id, 'name': name, 'composer': composer}
            return 1
        if statement == sql_repo.UPDATE:
            name, composer, song_id = params
            if song_id not in rows:
                return 0
            rows[song_id] = {'id': song_id, 'name': name, 'composer': composer}
            return 1
        if statement == sql_repo.DELETE:
            song_id, = params
            return 1 if rows.pop(song_id, None) is not None else 0
        raise AssertionError(f"Unexpected statement: {statement}")

    async def fetchone(self):
        row = self.result[0] if self.result else None
        if row is None or self.as_dict:
            return row
        return tuple(row.values())

    async def fetchall(self):
        if self.as_dict:
            return list(self.result)
        return [tuple(row.values()) for row in self.result]


class FakeConnection:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.snapshot = None

    def cursor(self, cursor_class=None):
        return FakeCursor(self.db, as_dict=cursor_class is not None)

    async def begin(self):
        self.snapshot = {key: dict(row) for key, row in self.db.rows.items()}

    async def commit(self):
        self.db.commits += 1
        self.snapshot = None

    async def rollback(self):
        self.db.rollbacks += 1
        if self.snapshot is not None:
            self.db.rows = self.snapshot
            self.snapshot = None


class FakeAiomysqlPool:
    def __init__(self, db: FakeDatabase):
        self.db = db
        self.closed = False

    @asynccontextmanager
    async def acquire(self):
        if self.db.unreachable:
            raise OperationalError(2003, "Can't connect to MySQL server on 'localhost'")
        yield FakeConnection(self.db)

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass


class FakeMySQLPool(MySQLPool):
    def __init__(self, db: FakeDatabase):
        super().__init__(host='localhost', port=3306, user='user', password='password', db='songs')
        self.fake_db = db

    async def create_pool(self):
        self.pool = FakeAiomysqlPool(self.fake_db)


# ========================================
# Redis
# ========================================


def match_pattern(pattern: str) -> re.Pattern:
    """Turns a redis MATCH pattern (*, ? and backslash escapes) into a regex."""
    parts = []
    chars = iter(pattern)
    for char in chars:
        if char == '\\':
            parts.append(re.escape(next(chars, '\\')))
        elif char == '*':
            parts.append('.*')
        elif char == '?':
            parts.append('.')
        else:
            parts.append(re.escape(char))
    return re.compile(''.join(parts) + r'\Z', re.DOTALL)


class FakeRedisData:
    """Key space of the fake client. Values that are not bytes stand for non-string types."""

    def __init__(self):
        self.values = {}
        self.set_calls = []
        self.unreachable = False
        # How many times SCAN reports each key
        self.scan_repeats = 1
        # Keys removed right after SCAN has reported them
        self.vanish_after_scan = set()


class FakeRedisClient:
    def __init__(self, data: FakeRedisData):
        self.data = data

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False

    def _check(self):
        if self.data.unreachable:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def get(self, key):
        self._check()
        value = self.data.values.get(key)
        if value is not None and not isinstance(value, bytes):
            raise ResponseError("WRONGTYPE Operation against a key holding the wrong kind of value")
        return value

    async def set(self, key, value, **kwargs):
        self._check()
        self.data.set_calls.append((key, kwargs))
        self.data.values[key] = value.encode() if isinstance(value, str) else value
        return True

    async def delete(self, *keys):
        self._check()
        return sum(1 for key in keys if self.data.values.pop(key, None) is not None)

    async def mget(self, keys):
        self._check()
        values = [self.data.values.get(key) for key in keys]
        return [value if isinstance(value, bytes) else None for value in values]

    async def scan_iter(self, match=None):
        self._check()
        regex = match_pattern(match) if match is not None else None
        for key in list(self.data.values):
            if regex is None or regex.match(key):
                for _ in range(self.data.scan_repeats):
                    yield key
                if key in self.data.vanish_after_scan:
                    self.data.values.pop(key, None)


class FakeRedis:
    def __init__(self, data: FakeRedisData):
        self.data = data
        self.closed = False

    def client(self):
        return FakeRedisClient(self.data)

    async def aclose(self):
        self.closed = True


class FakeRedisPool(RedisPool):
    def __init__(self, data: FakeRedisData):
        super().__init__(host='localhost', port=6379, db=0)
        self.fake_data = data

    async def create_pool(self):
        self.pool = FakeRedis(self.fake_data)


# ========================================
# Fixtures
# ========================================


@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def mysql_pool(fake_db):
    return FakeMySQLPool(fake_db)


@pytest.fixture
def fake_redis_data():
    return FakeRedisData()


@pytest.fixture
def redis_pool(fake_redis_data):
    return FakeRedisPool(fake_redis_data)
