import asyncio
from collections.abc import Callable
import functools
import logging
from typing import Any, TypeVar, cast

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from core.exceptions import DatabaseError

logger = logging.getLogger(__name__)

T = TypeVar("T")
AsyncFunc = Callable[..., Any]

RETRY_BASE_DELAY = 0.1


def with_retry(max_retries: int = 3, log_prefix: str = ""):
    """Retry a read operation on OperationalError with exponential backoff.

    Any other SQLAlchemyError, or the last OperationalError, becomes DatabaseError.

    Args:
        max_retries: Maximum number of attempts
        log_prefix: Prefix for log messages
    """

    def decorator(func: AsyncFunc) -> AsyncFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            action = log_prefix or getattr(func, "__name__", str(func))

            for attempt in range(max_retries):
                try:
                    return await func(*args, **kwargs)
                except OperationalError as e:
                    entity_info = _extract_entity_info(args, kwargs)
                    if attempt < max_retries - 1:
                        logger.warning(
                            "OperationalError while %s %s (attempt %d): %s", action, entity_info, attempt + 1, e
                        )
                        await asyncio.sleep(RETRY_BASE_DELAY * (2**attempt))
                        continue
                    logger.error("Database error while %s %s: %s", action, entity_info, e)
                    raise DatabaseError(message="Database failure") from e
                except SQLAlchemyError as e:
                    entity_info = _extract_entity_info(args, kwargs)
                    logger.error("Database error while %s %s: %s", action, entity_info, e)
                    raise DatabaseError(message="Database failure") from e

            raise DatabaseError(message="Database failure")

        return cast(AsyncFunc, wrapper)

    return decorator


def handle_db_errors(entity_name: str = ""):
    """Translate database errors of write operations without retrying.

    Args:
        entity_name: Entity name for logging
    """

    def decorator(func: AsyncFunc) -> AsyncFunc:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            func_name = getattr(func, "__name__", str(func))

            try:
                return await func(*args, **kwargs)
            except IntegrityError:
                # Left for the service layer to map
                raise
            except SQLAlchemyError as e:
                entity_info = _extract_entity_info(args, kwargs)
                prefix = f"{entity_name} " if entity_name else ""
                logger.error("Database error while %s%s %s: %s", prefix, func_name, entity_info, e)
                raise DatabaseError(message="Database failure") from e

        return wrapper

    return decorator


def _extract_entity_info(args: tuple, kwargs: dict) -> str:
    """Find an identifier among the call arguments for log messages."""
    # First positional argument is the session
    if len(args) > 1 and isinstance(args[1], int | str):
        return str(args[1])

    for key in ("post_id", "id", "title"):
        if key in kwargs:
            return f"{key}={kwargs[key]}"

    return ""
