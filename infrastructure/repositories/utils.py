import functools
import logging

from app.domain.exceptions import SongStoreUnavailableError


logger = logging.getLogger('repositories')


def unavailable_on(backend: str, *driver_errors):
    """
    A decorator for repository coroutines that turns transport failures of
    the driver into SongStoreUnavailableError.

    The driver exception stays attached as the cause. Nothing is retried.

    :param backend: The name of the backing store, used in logs and messages.
    :param driver_errors: Exception classes of the driver that mean the store is unreachable.
    :return: The decorator.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except driver_errors as e:
                logger.error(f"Error in {func.__name__}: {e}", exc_info=True, extra={'backend': backend})
                raise SongStoreUnavailableError(f"{backend} is unavailable: {e}") from e
        return wrapper
    return decorator
