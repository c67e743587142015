"""
Rich query gateway
Forwards ad hoc selector queries to the state store's query engine
"""

from typing import Optional
import structlog

from .encoder import encode_query_results
from ..config import get_ledger_config
from ..consent.storage import StateStore, get_state_store
from ..exceptions import LedgerError, InvalidArgumentError, QueryFailedError

logger = structlog.get_logger(__name__)


class QueryGateway:
    """Runs opaque query strings and returns the encoded result array"""

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or get_state_store()
        self.config = get_ledger_config()

    def run_query(self, query: str) -> bytes:
        """Execute query as-is and return a JSON array of key/record pairs"""
        if not self.config.query_enabled:
            raise QueryFailedError("Rich queries are disabled", reason="query_enabled=false")
        if not query or not query.strip():
            raise InvalidArgumentError("Query string must be non-empty", field="query")

        logger.info("Running rich query", query=query)

        try:
            results = self.store.get_query_result(query)
        except LedgerError:
            raise
        except Exception as e:
            logger.error("Failed to obtain query cursor", query=query, error=str(e))
            raise QueryFailedError("Failed to obtain query cursor", reason=str(e)) from e

        with results:
            try:
                payload = encode_query_results(results)
            except LedgerError:
                raise
            except Exception as e:
                logger.error("Failed to advance query cursor", query=query, error=str(e))
                raise QueryFailedError("Failed to advance query cursor", reason=str(e)) from e

        logger.info("Rich query completed", query=query, payload_bytes=len(payload))
        return payload


# Global query gateway instance
_query_gateway: Optional[QueryGateway] = None


def get_query_gateway() -> QueryGateway:
    """Get the global query gateway instance"""
    global _query_gateway
    if _query_gateway is None:
        _query_gateway = QueryGateway()
    return _query_gateway


def run_query(query: str) -> bytes:
    """Execute query against the global state store"""
    return get_query_gateway().run_query(query)
