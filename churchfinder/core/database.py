from sqlalchemy import create_engine, text
from fastapi import HTTPException
from sqlalchemy.orm import declarative_base, sessionmaker
from churchfinder.core.config import settings
import logging
from contextlib import contextmanager

logger = logging.getLogger(__name__)

# Create Base class for SQLAlchemy models
Base = declarative_base()

class Database:
    def __init__(self):
        self._engine = None
        self._session_factory = None

    @property
    def url(self) -> str:
        return str(settings.SQLALCHEMY_DATABASE_URI)

    def init_app(self):
        """Initialize database connection"""
        if not self._engine:
            url = self.url
            if url.startswith("sqlite"):
                # Handlers run in a thread pool, so the connection must be shareable
                self._engine = create_engine(
                    url,
                    connect_args={"check_same_thread": False},
                )
            else:
                self._engine = create_engine(
                    url,
                    pool_pre_ping=True,
                    pool_size=5,
                    max_overflow=10,
                    pool_timeout=30
                )

            self._session_factory = sessionmaker(
                autocommit=False,
                autoflush=False,
                bind=self._engine
            )

    async def check_connection(self) -> bool:
        """Check database connection."""
        if not self._session_factory:
            self.init_app()

        try:
            db = self._session_factory()
            db.execute(text("SELECT 1"))
            db.close()
            return True
        except Exception as e:
            logger.error(f"Database connection check failed: {str(e)}")
            return False

    def init_db(self) -> None:
        """Create all tables that do not exist yet."""
        if not self._session_factory:
            self.init_app()

        try:
            # Register every model on Base.metadata
            import churchfinder.models  # noqa

            Base.metadata.create_all(bind=self._engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Database initialization failed: {str(e)}")
            raise

    def drop_db(self) -> None:
        """Drop all tables. Used by the test suite."""
        import churchfinder.models  # noqa

        Base.metadata.drop_all(bind=self.engine)

    @contextmanager
    def session(self):
        """Context manager for database sessions."""
        if not self._session_factory:
            self.init_app()

        session = self._session_factory()

        try:
            yield session
            session.commit()
        except HTTPException:
            # Error responses raised by route handlers
            session.rollback()
            raise
        except Exception as e:
            logger.error(f"Session error: {str(e)}")
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self):
        """Dispose of the current engine and session factory."""
        if self._engine:
            logger.info("Disposing database connection...")
            try:
                self._engine.dispose()
                self._engine = None
                self._session_factory = None
                logger.info("Database connection disposed successfully")
            except Exception as e:
                logger.error(f"Error disposing database connection: {str(e)}")
                raise

    @property
    def engine(self):
        """Get the SQLAlchemy engine."""
        if not self._engine:
            self.init_app()
        return self._engine

    @property
    def session_factory(self):
        """Get the session factory."""
        if not self._session_factory:
            self.init_app()
        return self._session_factory

# Create global database instance
db = Database()

__all__ = ['Base', 'Database', 'db']
