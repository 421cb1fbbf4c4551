import logging
from typing import Optional

import aiomysql
from aiomysql import IntegrityError, InterfaceError, OperationalError
from pymysql.constants.ER import DUP_ENTRY
from pydantic import ValidationError

from app.domain.repositories_interfaces.song_repo import SongRepoInterface
from app.domain.entities.song import Song
from app.domain.exceptions import SongConflictError, SongDecodeError, SongNotFoundError
from infrastructure.aiomysql_config import MySQLPool
from infrastructure.repositories.utils import unavailable_on


logger = logging.getLogger('repositories')

CREATE_TABLE = '''CREATE TABLE IF NOT EXISTS songs (
    id VARCHAR(255) NOT NULL PRIMARY KEY,
    name VARCHAR(255) NOT NULL,
    composer VARCHAR(255) NOT NULL
)'''
SELECT_ALL = "SELECT id, name, composer FROM songs"
SELECT_BY_ID = "SELECT id, name, composer FROM songs WHERE id=%s"
INSERT = "INSERT INTO songs (id, name, composer) VALUES (%s, %s, %s)"
UPDATE = "UPDATE songs SET name=%s, composer=%s WHERE id=%s"
DELETE = "DELETE FROM songs WHERE id=%s"


class MySQLSongRepo(SongRepoInterface):
    def __init__(self, pool: MySQLPool):
        self.pool = pool

    @staticmethod
    def _to_song(row: dict) -> Song:
        try:
            return Song.model_validate(row)
        except ValidationError as e:
            raise SongDecodeError(f"Malformed songs row: {e}", song_id=row.get('id')) from e

    async def _write_and_read_back(self, statement: str, params: tuple, song_id: str) -> tuple:
        # MySQL has no RETURNING, so the stored row is read back on the same
        # connection before the transaction commits
        async with self.pool.get_connection() as conn:
            await conn.begin()
            try:
                async with conn.cursor(aiomysql.DictCursor) as cursor:
                    affected = await cursor.execute(statement, params)
                    await cursor.execute(SELECT_BY_ID, (song_id,))
                    row = await cursor.fetchone()
                await conn.commit()
            except Exception:
                await conn.rollback()
                raise
        return affected, row

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def create_schema(self) -> None:
        async with self.pool.get_connection() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(CREATE_TABLE)
        logger.info("SONGS TABLE READY", extra={'backend': 'mysql'})

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def get_all(self) -> list[Song]:
        logger.debug("GET ALL SONGS", extra={'backend': 'mysql'})
        async with self.pool.get_connection() as conn:
            async with conn.cursor(aiomysql.DictCursor) as cursor:
                await cursor.execute(SELECT_ALL)
                rows = await cursor.fetchall()
        # One malformed row fails the whole call
        return [self._to_song(row) for row in rows]

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def get_by_id(self, song_id: str) -> Optional[Song]:
        logger.debug(f"GET SONG {song_id}", extra={'backend': 'mysql'})
        async with self.pool.get_connection() as conn:
            async with conn.cursor(aiomysql.DictCursor) as cursor:
                await cursor.execute(SELECT_BY_ID, (song_id,))
                row = await cursor.fetchone()
        if row is None:
            return None
        return self._to_song(row)

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def create(self, song: Song) -> Song:
        logger.debug(f"CREATE SONG {song.id}", extra={'backend': 'mysql'})
        try:
            _, row = await self._write_and_read_back(INSERT, (song.id, song.name, song.composer), song.id)
        except IntegrityError as e:
            if e.args and e.args[0] == DUP_ENTRY:
                raise SongConflictError("Song already exists", song_id=song.id) from e
            raise
        return self._to_song(row)

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def update(self, song: Song) -> Song:
        logger.debug(f"UPDATE SONG {song.id}", extra={'backend': 'mysql'})
        affected, row = await self._write_and_read_back(UPDATE, (song.name, song.composer, song.id), song.id)
        if not affected or row is None:
            raise SongNotFoundError("Song does not exist", song_id=song.id)
        return self._to_song(row)

    @unavailable_on('mysql', OperationalError, InterfaceError)
    async def delete(self, song_id: str) -> None:
        # Deleting a missing id affects zero rows and is not an error
        logger.debug(f"DELETE SONG {song_id}", extra={'backend': 'mysql'})
        async with self.pool.get_connection() as conn:
            async with conn.cursor() as cursor:
                await cursor.execute(DELETE, (song_id,))
