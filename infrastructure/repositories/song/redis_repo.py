import logging
from typing import Optional, Union

from pydantic import ValidationError
from redis.exceptions import ConnectionError as RedisConnectionError, ResponseError, TimeoutError as RedisTimeoutError

from infrastructure.redis_config import RedisPool
from infrastructure.repositories.utils import unavailable_on
from app.domain.repositories_interfaces.song_repo import SongRepoInterface
from app.domain.entities.song import Song
from app.domain.exceptions import SongDecodeError


logger = logging.getLogger('repositories')

# Characters with a meaning in SCAN MATCH patterns, backslash first
GLOB_CHARS = ('\\', '*', '?', '[', ']')


def escape_glob(value: str) -> str:
    for char in GLOB_CHARS:
        value = value.replace(char, '\\' + char)
    return value


class RedisSongRepo(SongRepoInterface):
    def __init__(self, redis_pool: RedisPool, key_prefix: str = 'song:'):
        self.redis_pool = redis_pool
        # Only keys under the prefix are treated as songs
        self.key_prefix = key_prefix

    def _key(self, song_id: str) -> str:
        return f'{self.key_prefix}{song_id}'

    @staticmethod
    def _decode(data: Union[str, bytes], key: str) -> Song:
        try:
            return Song.model_validate_json(data)
        except ValidationError as e:
            raise SongDecodeError(f"Malformed value under {key!r}: {e}") from e

    @unavailable_on('redis', RedisConnectionError, RedisTimeoutError)
    async def get_all(self) -> list[Song]:
        logger.debug("GET ALL SONGS", extra={'backend': 'redis'})
        pattern = f'{escape_glob(self.key_prefix)}*'
        async with await self.redis_pool.get_connection() as conn:
            # SCAN may yield the same key more than once
            keys = list(dict.fromkeys([key async for key in conn.scan_iter(match=pattern)]))
            if not keys:
                return []
            values = await conn.mget(keys)
        # A key deleted between SCAN and MGET comes back as None and is skipped
        return [self._decode(value, key) for key, value in zip(keys, values) if value is not None]

    @unavailable_on('redis', RedisConnectionError, RedisTimeoutError)
    async def get_by_id(self, song_id: str) -> Optional[Song]:
        logger.debug(f"GET SONG {song_id}", extra={'backend': 'redis'})
        key = self._key(song_id)
        async with await self.redis_pool.get_connection() as conn:
            try:
                data = await conn.get(key)
            except ResponseError as e:
                # WRONGTYPE: the key holds something other than a string
                raise SongDecodeError(f"Malformed value under {key!r}: {e}", song_id=song_id) from e
        if data is None:
            return None
        return self._decode(data, key)

    @unavailable_on('redis', RedisConnectionError, RedisTimeoutError)
    async def create(self, song: Song) -> Song:
        # Last write wins, an existing song under the same id is overwritten
        logger.debug(f"SAVE SONG {song.id}", extra={'backend': 'redis'})
        key = self._key(song.id)
        payload = song.model_dump_json()
        async with await self.redis_pool.get_connection() as conn:
            await conn.set(key, payload)
        return self._decode(payload, key)

    async def update(self, song: Song) -> Song:
        # No existence check: updating a missing id creates it
        return await self.create(song)

    @unavailable_on('redis', RedisConnectionError, RedisTimeoutError)
    async def delete(self, song_id: str) -> None:
        logger.debug(f"DELETE SONG {song_id}", extra={'backend': 'redis'})
        async with await self.redis_pool.get_connection() as conn:
            await conn.delete(self._key(song_id))
