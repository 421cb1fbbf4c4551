import logging

import aiomysql
from pymysql.constants import CLIENT

from app.domain.exceptions import SongStoreUnavailableError


logger = logging.getLogger('infrastructure')


class MySQLPool:
    def __init__(self, host: str, port: int, user: str, password: str, db: str,
                 minsize: int = 1, maxsize: int = 10):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.db = db
        self.minsize = minsize
        self.maxsize = maxsize
        self.pool = None

    async def create_pool(self):
        # FOUND_ROWS makes UPDATE report matched rows instead of changed rows,
        # so an update with unchanged values is not mistaken for a missing row
        self.pool = await aiomysql.create_pool(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            db=self.db,
            minsize=self.minsize,
            maxsize=self.maxsize,
            autocommit=True,
            client_flag=CLIENT.FOUND_ROWS,
        )
        logger.info(f"MYSQL POOL CREATED {self.host}:{self.port}/{self.db}", extra={'backend': 'mysql'})

    async def close_pool(self):
        if self.pool is None:
            return
        self.pool.close()
        await self.pool.wait_closed()
        self.pool = None
        logger.info("MYSQL POOL CLOSED", extra={'backend': 'mysql'})

    def get_connection(self):
        """
        Returns a context manager that acquires a connection from the pool
        and releases it back on exit.

        :raises SongStoreUnavailableError: If the pool has not been created yet.
        """
        if self.pool is None:
            raise SongStoreUnavailableError("MySQL pool is not created")
        return self.pool.acquire()
