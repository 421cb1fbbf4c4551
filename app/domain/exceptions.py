from typing import Optional


class SongRepoError(Exception):
    """Base class for every failure raised by a song repository."""

    def __init__(self, message: str, song_id: Optional[str] = None):
        self.song_id = song_id
        super().__init__(message + (f" (song id: {song_id})" if song_id is not None else ""))


class SongNotFoundError(SongRepoError):
    """A write targeted a song that is not stored."""


class SongConflictError(SongRepoError):
    """A song with the same id is already stored."""


class SongDecodeError(SongRepoError):
    """A stored row or value could not be turned into a Song."""


class SongStoreUnavailableError(SongRepoError):
    """The backing store could not be reached."""
