"""
Database schema and connection management.

Uses SQLite with SQLAlchemy as a named-blob key-value table.
"""

from datetime import datetime
from pathlib import Path
from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

Base = declarative_base()


class Blob(Base):
    """Serialized value stored under a fixed key."""

    __tablename__ = "blobs"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()


def session_factory(db_path: Path) -> sessionmaker:
    """
    Build a session factory bound to one engine, for long-lived callers.

    Args:
        db_path: Path to SQLite database file
    """
    engine = create_engine(f"sqlite:///{db_path}")
    return sessionmaker(bind=engine)


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    Session = session_factory(db_path)
    return Session()
