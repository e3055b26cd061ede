from __future__ import annotations

import logging
import threading
from typing import Dict, Iterable, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from company_api.core.errors import InternalError, NotFoundError
from company_api.domain import User
from company_api.models.user import UserRow

logger = logging.getLogger(__name__)


class UserStore(Protocol):
    def get_by_email(self, email: str) -> User:
        """NotFoundError quando nenhum usuário tem esse email."""
        ...


class SqlUserStore:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User:
        try:
            row = self.db.scalar(select(UserRow).where(UserRow.email == email))
        except SQLAlchemyError as e:
            logger.exception("DB error fetching user by email")
            raise InternalError("query user") from e

        if row is None:
            raise NotFoundError("user not found")
        return User(id=row.id, name=row.name, email=row.email, password_hash=row.password_hash)


class InMemoryUserStore:
    def __init__(self, users: Iterable[User] = ()):
        self._lock = threading.Lock()
        self._by_email: Dict[str, User] = {u.email: u for u in users}

    def add(self, user: User) -> None:
        with self._lock:
            self._by_email[user.email] = user

    def get_by_email(self, email: str) -> User:
        with self._lock:
            user = self._by_email.get(email)
        if user is None:
            raise NotFoundError("user not found")
        return user
