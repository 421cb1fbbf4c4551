import logging

from redis.asyncio import Redis

from app.domain.exceptions import SongStoreUnavailableError


logger = logging.getLogger('infrastructure')


class RedisPool:
    def __init__(self, host: str, port: int, db: int):
        self.host = host
        self.port = port
        self.db = db
        self.pool = None

    async def create_pool(self):
        self.pool = await Redis(host=self.host, port=self.port, db=self.db)
        logger.info(f"REDIS POOL CREATED {self.host}:{self.port}/{self.db}", extra={'backend': 'redis'})

    async def get_connection(self) -> Redis:
        if self.pool is None:
            raise SongStoreUnavailableError("Redis pool is not created")
        return self.pool.client()

    async def close_pool(self):
        if self.pool is None:
            return
        await self.pool.aclose()
        self.pool = None
        logger.info("REDIS POOL CLOSED", extra={'backend': 'redis'})
