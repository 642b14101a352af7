import logging

from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from os import getenv

from models.base_model import Base
from models.user import User  # noqa: F401  registers the users table on Base.metadata

logger = logging.getLogger(__name__)


class DBStorage:
    __engine = None
    __session = None

    def __init__(self, database_url: str | None = None, echo: bool = False):
        """Remember the connection settings; the engine is built by reload()."""
        self.database_url = database_url
        self.echo = echo

    def _create_engine(self, url: str):
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
            engine = create_engine(url, echo=self.echo, **kwargs)

            @event.listens_for(engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()
            return engine
        return create_engine(url, echo=self.echo, pool_pre_ping=True)

    def reload(self, database_url: str | None = None, echo: bool | None = None):
        """Create the engine and tables, and start a scoped session"""
        if database_url:
            self.database_url = database_url
        if echo is not None:
            self.echo = echo
        url = self.database_url or getenv("DATABASE_URL", "sqlite:///auth-api.db")

        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        self.__engine = self._create_engine(url)
        logger.debug("Storage bound to %s", self.__engine.url.render_as_string(hide_password=True))
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying
    def get_session(self):
        return self.__session
