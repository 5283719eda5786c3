# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation.

A unit of work publishes its session through a ContextVar. Repositories ask
for a session with :func:`session_for`; inside an open unit of work they get
the shared one and only flush, so nothing they write becomes visible to other
connections before the unit of work commits.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass
from typing import TypeVar

from sqlalchemy.orm import Session

from accounts.domain.users.repositories import TransactionHandler
from accounts.infrastructure.db.session import SessionFactory, session_scope
from accounts.shared.logging import logger

T = TypeVar("T")

_ACTIVE_SESSION: ContextVar[Session | None] = ContextVar("active_session", default=None)


@dataclass(slots=True)
class SqlAlchemyUnitOfWork(AbstractContextManager):
    """SQLAlchemy-backed unit of work."""

    session_factory: SessionFactory
    _session: Session | None = None
    _token: Token | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        self._token = _ACTIVE_SESSION.set(self._session)
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.warning(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
            else:
                self._session.commit()
                logger.debug("uow: committed")
        except Exception:
            logger.exception("uow: exception while finalising")
            self._session.rollback()
            raise
        finally:
            if self._token is not None:
                _ACTIVE_SESSION.reset(self._token)
                self._token = None
            self._session.close()
            logger.debug("uow: session closed")
            self._session = None


class SqlAlchemyTransactionHandler(TransactionHandler):
    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def execute(self, operation: Callable[[], T]) -> T:
        if _ACTIVE_SESSION.get() is not None:
            # nested call joins the surrounding transaction
            return operation()
        with SqlAlchemyUnitOfWork(self._session_factory):
            return operation()


@contextmanager
def session_for(factory: SessionFactory) -> Iterator[Session]:
    """Yield the unit of work's session if one is open, else a short-lived one."""

    current = _ACTIVE_SESSION.get()
    if current is not None:
        yield current
        return
    with session_scope(factory) as session:
        yield session
