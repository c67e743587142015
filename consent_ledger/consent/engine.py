"""
Consent engine selection
Builds the engine for a storage design and exposes module-level shortcuts
"""

from typing import Dict, List, Optional, Type
import structlog

from .base import ConsentEngine
from .membership import MembershipRecordEngine
from .tombstone import TombstoneOverlayEngine
from .models import AccessRequest, UpdateRequest, UpdateResult
from .storage import StateStore
from ..config import EngineDesign, get_ledger_config

logger = structlog.get_logger(__name__)

ENGINE_CLASSES: Dict[EngineDesign, Type[ConsentEngine]] = {
    EngineDesign.MEMBERSHIP: MembershipRecordEngine,
    EngineDesign.TOMBSTONE: TombstoneOverlayEngine,
}


def create_consent_engine(design: Optional[EngineDesign] = None,
                          store: Optional[StateStore] = None) -> ConsentEngine:
    """Create an engine for design, defaulting to the configured one"""
    design = EngineDesign(design or get_ledger_config().engine_design)
    return ENGINE_CLASSES[design](store)


# Global consent engine instances, one per design
_consent_engines: Dict[EngineDesign, ConsentEngine] = {}


def get_consent_engine(design: Optional[EngineDesign] = None) -> ConsentEngine:
    """Get the global consent engine for design"""
    design = EngineDesign(design or get_ledger_config().engine_design)
    if design not in _consent_engines:
        logger.info("Initializing consent engine", design=design.value)
        _consent_engines[design] = create_consent_engine(design)
    return _consent_engines[design]


# Convenience functions
def check_access(request: AccessRequest,
                 design: Optional[EngineDesign] = None) -> Dict[str, List[str]]:
    """Map each scope key with access to the users holding it"""
    return get_consent_engine(design).check_access(request)


def update_consent(request: UpdateRequest,
                   design: Optional[EngineDesign] = None) -> UpdateResult:
    """Grant or revoke consent across the requested columns"""
    return get_consent_engine(design).update_consent(request)
