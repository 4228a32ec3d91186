#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Database Engine and Session Management for SQLAlchemy 2.0

This module provides database connection and transactional session management
for PostgreSQL (production) and SQLite (local development and tests).
"""

import os
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import QueuePool, StaticPool

from models import Base


def get_database_url() -> str:
    """
    Get the database URL from environment variables.
    """
    database_url = os.environ.get('DATABASE_URL')

    if not database_url:
        raise RuntimeError("DATABASE_URL environment variable is not set.")

    # Handle Heroku/Render style postgres:// URLs
    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)
    return database_url


def create_database_engine(database_url: Optional[str] = None):
    """
    Create SQLAlchemy engine with settings appropriate for the backend.

    Args:
        database_url: Optional database URL. If not provided, uses get_database_url().

    Returns:
        SQLAlchemy Engine instance
    """
    if database_url is None:
        database_url = get_database_url()
    elif database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)

    if database_url.startswith('sqlite'):
        # Single shared connection so in-memory databases survive across sessions
        engine = create_engine(
            database_url,
            poolclass=StaticPool,
            connect_args={'check_same_thread': False},
            echo=False
        )

        @event.listens_for(engine, 'connect')
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute('PRAGMA foreign_keys=ON')
            cursor.close()

        return engine

    # PostgreSQL configuration with connection pooling
    return create_engine(
        database_url,
        poolclass=QueuePool,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,  # Recycle connections after 30 minutes
        pool_pre_ping=True,
        echo=False
    )


class DatabaseSession:
    """
    Database session manager.
    One instance is created per application and handed to the services.
    """

    def __init__(self, database_url: Optional[str] = None):
        self._engine = create_database_engine(database_url)
        self._session_factory = sessionmaker(
            bind=self._engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False
        )

    @property
    def engine(self):
        """Get the SQLAlchemy engine."""
        return self._engine

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """
        Provide a transactional scope around a series of operations.

        Usage:
            with db.session_scope() as session:
                session.add(obj)
                # Auto-commits on success, rolls back on exception
        """
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_all_tables(self):
        """Create all tables defined in models.py."""
        Base.metadata.create_all(self._engine)

    def get_db_type(self) -> str:
        """Return the database type ('postgresql' or 'sqlite')."""
        url = str(self._engine.url)
        if 'postgresql' in url:
            return 'postgresql'
        return 'sqlite'

    def dispose(self):
        """Close pooled connections."""
        self._engine.dispose()


__all__ = [
    'DatabaseSession',
    'create_database_engine',
    'get_database_url',
]
