import asyncio
import logging
from typing import Optional

from app.domain.repositories_interfaces.song_repo import SongRepoInterface
from app.domain.entities.song import Song
from app.domain.exceptions import SongRepoError


logger = logging.getLogger('use_cases')


class SongUseCases:
    def __init__(self, repo: SongRepoInterface, backend: str = 'NONE', timeout: Optional[float] = None):
        self.repo = repo
        self.backend = backend
        self.timeout = timeout

    async def _call(self, action: str, coro):
        """
        Awaits a repository call within the configured timeout.

        Failures are logged and re-raised unchanged, nothing is retried.

        :param action: A short description of the call used in logs.
        :param coro: The repository coroutine to await.
        :return: Whatever the repository call returns.
        """
        logger.info(action, extra={'backend': self.backend})
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except (SongRepoError, asyncio.TimeoutError) as e:
            logger.error(f"{action} FAILED: {e!r}", exc_info=True, extra={'backend': self.backend})
            raise

    async def list_songs(self) -> list[Song]:
        """
        Retrieves every stored song. The order depends on the backend.

        :return: A list of Song objects, empty if nothing is stored.
        """
        return await self._call("LIST SONGS", self.repo.get_all())

    async def get_song(self, song_id: str) -> Optional[Song]:
        """
        Retrieves a song by its ID.

        :param song_id: The ID of the song.
        :return: The Song object, or None if no song has this ID.
        """
        song = await self._call(f"GET SONG {song_id}", self.repo.get_by_id(song_id))
        if song is None:
            logger.info(f"SONG {song_id} NOT FOUND", extra={'backend': self.backend})
        return song

    async def add_song(self, song_id: str, name: str, composer: str) -> Song:
        """
        Stores a new song.

        :param song_id: The ID of the new song.
        :param name: The title of the song.
        :param composer: The composer of the song.
        :return: The song as stored.
        :raises SongConflictError: If the backend rejects a duplicate ID.
        """
        song = Song(id=song_id, name=name, composer=composer)
        return await self._call(f"ADD SONG {song_id}", self.repo.create(song))

    async def edit_song(self, song_id: str, name: str, composer: str) -> Song:
        """
        Replaces the name and composer of a song. The ID is only used to find it.

        :param song_id: The ID of the song to edit.
        :param name: The new title.
        :param composer: The new composer.
        :return: The song as stored.
        :raises SongNotFoundError: If the backend requires the song to exist and it does not.
        """
        song = Song(id=song_id, name=name, composer=composer)
        return await self._call(f"EDIT SONG {song_id}", self.repo.update(song))

    async def remove_song(self, song_id: str) -> None:
        # Removing a missing song is a no-op
        await self._call(f"REMOVE SONG {song_id}", self.repo.delete(song_id))
