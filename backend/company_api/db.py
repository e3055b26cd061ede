from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Session
from company_api.core.settings import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

engine = create_engine(
    settings.DATABASE_URL,
    connect_args={"check_same_thread": False} if _is_sqlite else {},
    pool_pre_ping=not _is_sqlite,
    **({} if _is_sqlite else {"pool_timeout": settings.DB_POOL_TIMEOUT_S}),
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


class Base(DeclarativeBase):
    pass


def init_db(bind=None) -> None:
    # Import explícito dos models para registrar no metadata
    import company_api.models.company  # noqa: F401
    import company_api.models.user  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


# dependency padrão FastAPI
def get_db() -> "Session":
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
