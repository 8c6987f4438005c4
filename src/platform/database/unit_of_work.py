"""
Unit of Work Pattern - one database session and transaction shared by repositories

Architecture:
- UoW owns the session lifecycle
- UoW owns commit/rollback
- Repositories get the shared session from the UoW
- Use cases coordinate several repositories through the UoW

Row locks taken inside the UoW (SELECT ... FOR UPDATE) are held until commit or
rollback, so one `async with uow:` block is one lock scope.
"""

from __future__ import annotations

import abc
from typing import Any, AsyncContextManager, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            seat = await uow.seat_repo.get_for_update(...)
            await uow.commit()

    Leaving the block without commit rolls back.
    """

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """
    SQLAlchemy implementation of Unit of Work

    Subclasses create their repositories in `_bind_repos` with the shared session.
    """

    def __init__(self, session_factory: Callable[[], AsyncContextManager[AsyncSession]]) -> None:
        self.session_factory = session_factory
        self.session: Optional[AsyncSession] = None
        self._session_cm: Optional[AsyncContextManager[AsyncSession]] = None

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        self._session_cm = self.session_factory()
        self.session = await self._session_cm.__aenter__()
        self._bind_repos(self.session)
        await super().__aenter__()
        return self

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self._session_cm is not None:
                await self._session_cm.__aexit__(*args)
            self.session = None
            self._session_cm = None

    @abc.abstractmethod
    def _bind_repos(self, session: AsyncSession) -> None:
        raise NotImplementedError

    async def _commit(self) -> None:
        assert self.session is not None
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
