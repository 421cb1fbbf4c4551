from app.domain.entities.song import Song
from abc import ABC, abstractmethod
from typing import Optional


class SongRepoInterface(ABC):
    @abstractmethod
    async def get_all(self) -> list[Song]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id(self, song_id: str) -> Optional[Song]:
        # Missing songs are reported as None by every backend
        raise NotImplementedError

    @abstractmethod
    async def create(self, song: Song) -> Song:
        raise NotImplementedError

    @abstractmethod
    async def update(self, song: Song) -> Song:
        raise NotImplementedError

    @abstractmethod
    async def delete(self, song_id: str) -> None:
        raise NotImplementedError
