"""
Consent engine interface
Shared contract and record access helpers for both storage designs
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .models import AccessRequest, UpdateRequest, UpdateResult, GrantRecord
from .storage import StateStore, get_state_store
from ..config import EngineDesign


class ConsentEngine(ABC):
    """Decides, grants and revokes scoped consent against a state store.

    Engines hold no state between calls. Every operation re-reads the store,
    and a call spanning several columns is not atomic: a failure on one column
    leaves writes for earlier columns in place.
    """

    design: EngineDesign

    def __init__(self, store: Optional[StateStore] = None):
        self.store = store or get_state_store()

    @abstractmethod
    def check_access(self, request: AccessRequest) -> Dict[str, List[str]]:
        """Map each scope key with access to the users holding it.

        Raises ConsentNotFoundError when no requested scope has a qualifying user.
        """

    @abstractmethod
    def update_consent(self, request: UpdateRequest) -> UpdateResult:
        """Grant or revoke a user's consent across the requested columns"""

    def _read_grant(self, key: str) -> Optional[GrantRecord]:
        raw = self.store.get(key)
        if raw is None:
            return None
        return GrantRecord.from_bytes(key, raw)

    def _new_result(self, request: UpdateRequest) -> UpdateResult:
        return UpdateResult(
            design=self.design.value,
            action=request.action,
            user_id=request.user_id,
        )
