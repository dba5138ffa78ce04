from abc import ABC, abstractmethod
from typing import List
import threading
from itc_recon.schemas.compliance import ComplianceCheck

class ComplianceCheckStore(ABC):
    @abstractmethod
    def append(self, check: ComplianceCheck) -> ComplianceCheck:
        pass

    @abstractmethod
    def list_all(self) -> List[ComplianceCheck]:
        pass

class InMemoryComplianceCheckStore(ComplianceCheckStore):
    def __init__(self):
        self._storage: List[ComplianceCheck] = []
        self._lock = threading.Lock()

    def append(self, check: ComplianceCheck) -> ComplianceCheck:
        # Append-only. Stored copies are never handed out for mutation.
        stored = check.model_copy(deep=True)
        with self._lock:
            self._storage.append(stored)
        return stored.model_copy()

    def list_all(self) -> List[ComplianceCheck]:
        with self._lock:
            return [c.model_copy() for c in self._storage]
