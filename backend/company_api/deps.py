from __future__ import annotations

import threading
from datetime import timedelta
from typing import Optional

from fastapi import Depends
from sqlalchemy.orm import Session

from company_api.core.settings import Settings, settings
from company_api.db import get_db
from company_api.events.publisher import CompanyEventPublisher, build_publisher
from company_api.services.auth import AuthService
from company_api.services.company import CompanyService
from company_api.stores.company import CompanyStore, SqlCompanyStore
from company_api.stores.user import SqlUserStore, UserStore

# Global publisher instance (um Producer compartilhado por processo)
_publisher: Optional[CompanyEventPublisher] = None
_publisher_lock = threading.Lock()


def get_settings() -> Settings:
    return settings


def get_publisher(cfg: Settings = Depends(get_settings)) -> CompanyEventPublisher:
    global _publisher
    if _publisher is None:
        with _publisher_lock:
            if _publisher is None:
                _publisher = build_publisher(cfg)
    return _publisher


def close_publisher() -> None:
    global _publisher
    with _publisher_lock:
        if _publisher is not None:
            _publisher.close()
            _publisher = None


def get_company_store(db: Session = Depends(get_db)) -> CompanyStore:
    return SqlCompanyStore(db)


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return SqlUserStore(db)


def get_company_service(
    store: CompanyStore = Depends(get_company_store),
    publisher: CompanyEventPublisher = Depends(get_publisher),
) -> CompanyService:
    return CompanyService(store, publisher)


def get_auth_service(
    users: UserStore = Depends(get_user_store),
    cfg: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(users, cfg.AUTH_JWT_SECRET, timedelta(minutes=cfg.AUTH_JWT_TTL_MIN))
