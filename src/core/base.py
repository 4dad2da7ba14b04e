from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.core.exceptions.domain import to_domain_error
from src.utils.logger import get_logger


class BaseService:
    """Base service class with database dependency injection."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = get_logger(self.__class__.__name__)

    async def commit(self) -> None:
        """Commit the pending statement, translating store failures."""
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise to_domain_error(exc) from exc

    @asynccontextmanager
    async def store_errors(self) -> AsyncIterator[None]:
        """Translate store failures raised inside the block into domain errors."""
        try:
            yield
        except SQLAlchemyError as exc:
            await self.db.rollback()
            raise to_domain_error(exc) from exc
