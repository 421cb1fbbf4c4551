import asyncio
import logging

from config import logging_config  # Importing config to apply it
from infrastructure.services.repo_service import RepoService


logger = logging.getLogger(__name__)


async def main():
    # The backend is picked from SONG_BACKEND, the pool is disposed on exit
    async with RepoService() as repo_service:
        songs = await repo_service.song_use_cases.list_songs()
        for song in songs:
            logger.info(f"{song.id}: {song.name} by {song.composer}", extra={'backend': repo_service.backend})
        logger.info(f"{len(songs)} SONGS STORED", extra={'backend': repo_service.backend})


if __name__ == '__main__':
    asyncio.run(main())
