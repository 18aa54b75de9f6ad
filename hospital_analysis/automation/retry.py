import time
import logging
from functools import wraps

from hospital_analysis.core.exceptions import DataLoadError

logger = logging.getLogger(__name__)


def retry(times: int = 3, delay: float = 3, retry_on=(Exception,), give_up_on=(DataLoadError,)):
    """
    Retry decorator for automation tasks.

    Args:
        times: Number of attempts
        delay: Seconds between attempts
        retry_on: Exception types worth another attempt
        give_up_on: Exception types re-raised immediately (retrying a
            malformed file cannot help)
    """

    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            last_exception = None
            for attempt in range(1, times + 1):
                try:
                    logger.info(
                        "Attempt %s/%s for %s",
                        attempt,
                        times,
                        func.__name__,
                    )
                    return func(*args, **kwargs)
                except give_up_on:
                    raise
                except retry_on as exc:
                    last_exception = exc
                    logger.error(
                        "Error on attempt %s for %s: %s",
                        attempt,
                        func.__name__,
                        exc,
                    )
                    if attempt < times:
                        time.sleep(delay)

            logger.critical(
                "All %s attempts failed for %s",
                times,
                func.__name__,
            )
            raise last_exception

        return wrapper

    return decorator
