import asyncio
import logging
from functools import wraps
from typing import Optional

from sqlalchemy.exc import OperationalError

import config
from exceptions.configuration import VersionConflict

logger = logging.getLogger(__name__)


class TransactionManager:
    """
    Retry logic for saves that race with another writer of the same product.

    Only version conflicts and transient database locks are retried; every
    other engine error is a caller mistake and propagates immediately.
    """

    RETRYABLE_ERRORS = (VersionConflict, OperationalError)

    @staticmethod
    def with_retry(max_retries: Optional[int] = None, delay_base: Optional[float] = None):
        """
        Decorator for automatic retry of load-apply-save operations with exponential backoff.

        The wrapped coroutine must reload its input on every call, otherwise
        a retry would resave the stale snapshot that caused the conflict.

        Args:
            max_retries: Maximum number of retry attempts (default config.CONFIG_SAVE_MAX_RETRIES)
            delay_base: Base delay for exponential backoff (default config.CONFIG_SAVE_RETRY_DELAY)

        Example:
            @TransactionManager.with_retry()
            async def attempt():
                current = await ProductConfigRepository.load_product_config(product_id, session)
                ...
        """
        if max_retries is None:
            max_retries = config.CONFIG_SAVE_MAX_RETRIES
        if delay_base is None:
            delay_base = config.CONFIG_SAVE_RETRY_DELAY

        def decorator(func):
            @wraps(func)
            async def wrapper(*args, **kwargs):
                for attempt in range(max_retries + 1):
                    try:
                        return await func(*args, **kwargs)
                    except TransactionManager.RETRYABLE_ERRORS as e:
                        if attempt == max_retries:
                            logger.error(f"Function {func.__name__} failed after {max_retries} retries: {str(e)}")
                            raise

                        delay = delay_base * (2 ** attempt)
                        logger.warning(f"Attempt {attempt + 1} failed for {func.__name__}, retrying in {delay:.2f}s: {str(e)}")
                        await asyncio.sleep(delay)

            return wrapper
        return decorator
