"""
State store adapters for the consent ledger
Key/value persistence for grant records and revoke tombstones
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, UTC
from typing import Optional, List, Dict, Any
import structlog
from sqlalchemy import create_engine, Column, String, DateTime, LargeBinary
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import declarative_base
from sqlalchemy.orm import sessionmaker

from ..config import get_ledger_config, StateBackend
from ..exceptions import QueryFailedError, StoreUnavailableError, WriteConflictError

logger = structlog.get_logger(__name__)

Base = declarative_base()


class LedgerStateDB(Base):
    """SQLAlchemy model for one key/value pair of ledger state"""
    __tablename__ = "ledger_state"

    key = Column(String, primary_key=True)
    value = Column(LargeBinary, nullable=False)
    updated_at = Column(DateTime, nullable=False)


@dataclass(frozen=True)
class QueryResult:
    """A single key/value pair yielded by a rich query"""
    key: str
    value: bytes


class ResultsIterator(ABC):
    """Forward-only, non-restartable cursor over query results"""

    @abstractmethod
    def has_next(self) -> bool:
        ...

    @abstractmethod
    def next(self) -> QueryResult:
        ...

    @abstractmethod
    def close(self) -> None:
        ...

    def __enter__(self) -> "ResultsIterator":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class ListResultsIterator(ResultsIterator):
    """Cursor over an already materialised list of results"""

    def __init__(self, results: List[QueryResult]):
        self._results = results
        self._position = 0
        self.closed = False

    def has_next(self) -> bool:
        return not self.closed and self._position < len(self._results)

    def next(self) -> QueryResult:
        if not self.has_next():
            raise QueryFailedError("Cursor advanced past its last result")
        result = self._results[self._position]
        self._position += 1
        return result

    def close(self) -> None:
        self.closed = True


class StateStore(ABC):
    """Storage adapter over the external key/value ledger state"""

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Read the value under key, or None when absent"""

    @abstractmethod
    def put(self, key: str, value: bytes) -> None:
        """Write value under key"""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key; removing an absent key is not an error"""

    def get_query_result(self, query: str) -> ResultsIterator:
        """Run a rich query against the state; unsupported unless overridden"""
        raise QueryFailedError(
            "Rich queries are not supported by this state store",
            reason=type(self).__name__,
        )


class SQLStateStore(StateStore):
    """State store backed by a single SQL key/value table"""

    def __init__(self, database_url: Optional[str] = None):
        self.database_url = database_url or get_ledger_config().database_url
        self.engine = create_engine(self.database_url)
        self.SessionLocal = sessionmaker(bind=self.engine)

        # Create tables
        Base.metadata.create_all(bind=self.engine)

    def get(self, key: str) -> Optional[bytes]:
        try:
            with self.SessionLocal() as session:
                row = session.get(LedgerStateDB, key)
                return bytes(row.value) if row is not None else None

        except SQLAlchemyError as e:
            logger.error("Failed to get state", key=key, error=str(e))
            raise StoreUnavailableError(
                "Failed to get state", key=key, operation="get", reason=str(e)
            ) from e

    def put(self, key: str, value: bytes) -> None:
        try:
            with self.SessionLocal() as session:
                row = session.get(LedgerStateDB, key)
                now = datetime.now(UTC)
                if row is None:
                    session.add(LedgerStateDB(key=key, value=value, updated_at=now))
                else:
                    row.value = value
                    row.updated_at = now
                session.commit()

        except IntegrityError as e:
            logger.warning("Conflicting state write", key=key, error=str(e))
            raise WriteConflictError(key, reason=str(e)) from e
        except SQLAlchemyError as e:
            logger.error("Failed to put state", key=key, error=str(e))
            raise StoreUnavailableError(
                "Failed to put state", key=key, operation="put", reason=str(e)
            ) from e

    def delete(self, key: str) -> None:
        try:
            with self.SessionLocal() as session:
                session.query(LedgerStateDB).filter_by(key=key).delete()
                session.commit()

        except SQLAlchemyError as e:
            logger.error("Failed to delete state", key=key, error=str(e))
            raise StoreUnavailableError(
                "Failed to delete state", key=key, operation="delete", reason=str(e)
            ) from e


class InMemoryStateStore(StateStore):
    """In-memory storage for testing

    Rich queries accept only ``{"selector": {field: value, ...}}`` with
    exact-match equality on top-level fields, yielding matches in key order.
    """

    def __init__(self):
        self.state: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self.state.get(key)

    def put(self, key: str, value: bytes) -> None:
        self.state[key] = value

    def delete(self, key: str) -> None:
        self.state.pop(key, None)

    def get_query_result(self, query: str) -> ResultsIterator:
        try:
            selector = json.loads(query)["selector"]
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise QueryFailedError("Malformed selector query", reason=str(e)) from e
        if not isinstance(selector, dict):
            raise QueryFailedError("Malformed selector query", reason="selector must be an object")

        matches: List[QueryResult] = []
        for key in sorted(self.state):
            document = self._load_document(self.state[key])
            if document is None:
                continue
            if all(document.get(field) == value for field, value in selector.items()):
                matches.append(QueryResult(key=key, value=self.state[key]))
        return ListResultsIterator(matches)

    @staticmethod
    def _load_document(raw: bytes) -> Optional[Dict[str, Any]]:
        try:
            document = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            return None
        return document if isinstance(document, dict) else None


# Global state store instance
_state_store: Optional[StateStore] = None


def get_state_store() -> StateStore:
    """Get the global state store for the configured backend"""
    global _state_store
    if _state_store is None:
        config = get_ledger_config()
        if config.state_backend == StateBackend.MEMORY:
            _state_store = InMemoryStateStore()
        else:
            _state_store = SQLStateStore(config.database_url)
    return _state_store
