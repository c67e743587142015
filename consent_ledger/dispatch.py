"""
Invocation dispatch for the consent ledger
Routes a function name and positional string arguments to an engine operation
"""

import json
from typing import Dict, List, Optional, Sequence, Tuple
import structlog
from pydantic import BaseModel

from .config import EngineDesign, get_ledger_config
from .constants import Functions, RUN_QUERY_ARGS, STATUS_OK, STATUS_ERROR
from .consent.base import ConsentEngine
from .consent.engine import create_consent_engine
from .consent.storage import StateStore, get_state_store
from .exceptions import LedgerError, UnknownFunctionError
from .query.gateway import QueryGateway
from .utils.validators import parse_access_args, parse_update_args, validate_arity

logger = structlog.get_logger(__name__)

CHECK = "check"
UPDATE = "update"

# Function name -> (operation, design); a design of None uses the configured one
ROUTES: Dict[str, Tuple[str, Optional[EngineDesign]]] = {
    Functions.CHECK_ACCESS: (CHECK, None),
    Functions.UPDATE_CONSENT: (UPDATE, None),
    Functions.CHECK_ACCESS_MEMBERSHIP: (CHECK, EngineDesign.MEMBERSHIP),
    Functions.UPDATE_CONSENT_MEMBERSHIP: (UPDATE, EngineDesign.MEMBERSHIP),
    Functions.CHECK_ACCESS_TOMBSTONE: (CHECK, EngineDesign.TOMBSTONE),
    Functions.UPDATE_CONSENT_TOMBSTONE: (UPDATE, EngineDesign.TOMBSTONE),
}


class InvocationResponse(BaseModel):
    """Outcome of one invocation: a status, a message and optional payload bytes"""
    status: int
    message: str = ""
    payload: Optional[bytes] = None
    error_code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_OK

    @classmethod
    def success(cls, payload: Optional[bytes] = None) -> "InvocationResponse":
        return cls(status=STATUS_OK, payload=payload)

    @classmethod
    def failure(cls, error: LedgerError) -> "InvocationResponse":
        return cls(status=STATUS_ERROR, message=error.message, error_code=error.error_code)


class ConsentLedger:
    """Entry point for ledger invocations"""

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or get_state_store()
        self.config = get_ledger_config()
        self.engines: Dict[EngineDesign, ConsentEngine] = {
            design: create_consent_engine(design, self.store) for design in EngineDesign
        }
        self.query_gateway = QueryGateway(self.store)

    @staticmethod
    def known_functions() -> List[str]:
        return sorted([*ROUTES, Functions.RUN_QUERY, *Functions.LEGACY_ALIASES])

    def invoke(self, function: str, args: Sequence[str]) -> InvocationResponse:
        """Run function with args, converting ledger errors into error responses"""
        logger.info("Invoke is running", function=function, arg_count=len(args))

        try:
            payload = self._dispatch(function, list(args))
        except LedgerError as e:
            logger.warning("Invocation failed", function=function,
                           error_code=e.error_code, error=e.message)
            return InvocationResponse.failure(e)

        return InvocationResponse.success(payload)

    def _dispatch(self, function: str, args: List[str]) -> Optional[bytes]:
        name = Functions.LEGACY_ALIASES.get(function, function)

        if name == Functions.RUN_QUERY:
            validate_arity(args, RUN_QUERY_ARGS, function)
            return self.query_gateway.run_query(args[0])

        if name not in ROUTES:
            raise UnknownFunctionError(function, self.known_functions())

        operation, design = ROUTES[name]
        engine = self.engines[EngineDesign(design or self.config.engine_design)]

        if operation == CHECK:
            access = engine.check_access(parse_access_args(args, function))
            return json.dumps(access).encode("utf-8")

        result = engine.update_consent(parse_update_args(args, function))
        return result.model_dump_json().encode("utf-8")


# Global ledger instance
_ledger: Optional[ConsentLedger] = None


def get_ledger() -> ConsentLedger:
    """Get the global ledger instance"""
    global _ledger
    if _ledger is None:
        _ledger = ConsentLedger()
    return _ledger
