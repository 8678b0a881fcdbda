from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from app.config import settings

_is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Pool sizing only applies to server databases
_engine_options = (
    {"connect_args": {"check_same_thread": False}}
    if _is_sqlite
    else {"pool_size": settings.DB_POOL_SIZE, "max_overflow": settings.DB_MAX_OVERFLOW}
)

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verify connections before using
    echo=settings.DEBUG,  # Log SQL queries in debug mode
    **_engine_options,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Session:
    """
    FastAPI dependency for database sessions.

    One session per request, closed when the request ends. Repositories
    commit their own writes.

    Usage:
        @router.get("/catalog")
        def list_catalog(db: Session = Depends(get_db)):
            return PermissionCatalogService(db).list_permissions()
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
