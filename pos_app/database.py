import logging

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from pos_app.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


def _import_models():
    # Import all models so Base.metadata knows about them
    import pos_app.models.damaged_product  # noqa: F401
    import pos_app.models.delivery_receipt  # noqa: F401
    import pos_app.models.invoice  # noqa: F401
    import pos_app.models.product  # noqa: F401
    import pos_app.models.return_item  # noqa: F401
    import pos_app.models.stock_alert  # noqa: F401
    import pos_app.models.store_info  # noqa: F401


class Database:
    """One local database file: engine, schema and session factory.

    Lifecycle is ``open()`` -> ready -> ``close()``. Opening is idempotent and
    only creates tables and indexes that are missing, so existing data is
    never touched.
    """

    def __init__(self, url: str, timeout: float = 5.0):
        self.url = url
        self.timeout = timeout
        self.engine = None
        self._sessionmaker: sessionmaker | None = None

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self) -> None:
        if self.is_open:
            return

        kwargs: dict = {}
        if self.url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": self.timeout}
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                # Every session must see the same in-memory database
                kwargs["poolclass"] = StaticPool

        _import_models()
        try:
            engine = create_engine(self.url, **kwargs)
            Base.metadata.create_all(bind=engine)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Cannot open database {self.url}: {e}") from e

        self.engine = engine
        self._sessionmaker = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
        logger.info("Opened database %s", self.url)

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
            logger.info("Closed database %s", self.url)
        self.engine = None
        self._sessionmaker = None

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise StoreUnavailableError("Database is not open")
        return self._sessionmaker()
