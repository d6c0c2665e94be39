"""
Shared plumbing for the repository classes.

Repositories are thin, session-bound wrappers around SQLAlchemy queries.
They are constructed per request from the injected AsyncSession; nothing
here is module-level state. Any SQLAlchemyError raised inside a repository
method is logged and re-raised as StoreFailureError so services only ever
see domain errors.
"""

import functools
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cardfolio.exceptions import CardfolioError, StoreFailureError

logger = logging.getLogger(__name__)


def translate_store_errors(func):
    """Wrap an async repository method so driver errors become StoreFailureError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except CardfolioError:
            raise
        except SQLAlchemyError as exc:
            logger.exception("Store call %s failed", func.__qualname__)
            raise StoreFailureError() from exc

    return wrapper


class Repository:
    def __init__(self, session: AsyncSession):
        self.session = session
