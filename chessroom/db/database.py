"""Generate database session"""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessroom.core.config import AppSettings
from chessroom.db.schema import Base

_LOGGER = logging.getLogger(__name__)


def create_session_factory(settings: Optional[AppSettings] = None) -> sessionmaker[Session]:
    """Engine for the configured database URL. Ensures all tables are created."""
    settings = settings if settings is not None else AppSettings.from_env()
    engine = create_engine(settings.database_url, echo=settings.echo_sql)
    Base.metadata.create_all(bind=engine)
    _LOGGER.debug("Database ready at %s", engine.url)
    return sessionmaker(bind=engine)


def get_db(session_factory: sessionmaker[Session]) -> Generator[Session, None, None]:
    """One session per request scope, always closed afterwards"""
    db = session_factory()
    try:
        yield db
    finally:
        db.close()
