import logging
from typing import Optional, Union

from app.use_cases.songs.song_use_cases import SongUseCases
from config.main_config import (DB_HOST, DB_NAME, DB_USER, DB_PASSWORD, DB_PORT, REDIS_HOST, REDIS_PORT,
                                REDIS_DB, SONG_KEY_PREFIX, SONG_BACKEND, REPO_TIMEOUT)
from infrastructure.aiomysql_config import MySQLPool
from infrastructure.redis_config import RedisPool
from infrastructure.repositories.song.redis_repo import RedisSongRepo
from infrastructure.repositories.song.sql_repo import MySQLSongRepo


logger = logging.getLogger('infrastructure')

BACKENDS = ('sql', 'redis')


# Repository service that owns the pool of one backend and the song repository bound to it.
class RepoService:
    def __init__(self, backend: str = SONG_BACKEND, timeout: Optional[float] = REPO_TIMEOUT,
                 pool: Optional[Union[MySQLPool, RedisPool]] = None):
        if backend not in BACKENDS:
            raise ValueError(f"Unknown song backend {backend!r}, expected one of {BACKENDS}")
        self.backend = backend
        if backend == 'sql':
            self.pool = pool or MySQLPool(host=DB_HOST, port=DB_PORT, user=DB_USER,
                                          password=DB_PASSWORD, db=DB_NAME)
            self.song_repo = MySQLSongRepo(self.pool)
        else:
            self.pool = pool or RedisPool(host=REDIS_HOST, port=REDIS_PORT, db=REDIS_DB)
            self.song_repo = RedisSongRepo(self.pool, key_prefix=SONG_KEY_PREFIX)
        self.song_use_cases = SongUseCases(self.song_repo, backend=backend, timeout=timeout)

    async def open(self) -> None:
        await self.pool.create_pool()
        if self.backend == 'sql':
            try:
                await self.song_repo.create_schema()
            except Exception:
                await self.pool.close_pool()
                raise
        logger.info("REPO SERVICE OPENED", extra={'backend': self.backend})

    async def close(self) -> None:
        await self.pool.close_pool()
        logger.info("REPO SERVICE CLOSED", extra={'backend': self.backend})

    async def __aenter__(self) -> 'RepoService':
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
