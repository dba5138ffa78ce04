from abc import ABC, abstractmethod
from typing import Iterable, List
import threading
from itc_recon.schemas.reconciliation import Transaction

class TransactionStore(ABC):
    """Read side of the reconciliation view consumed by reports."""

    @abstractmethod
    def list_all(self) -> List[Transaction]:
        pass

class InMemoryTransactionStore(TransactionStore):
    def __init__(self):
        self._storage: List[Transaction] = []
        self._lock = threading.Lock()

    def replace_all(self, transactions: Iterable[Transaction]):
        # Rows are recomputed on every reconciliation run, never patched
        rows = list(transactions)
        with self._lock:
            self._storage = rows

    def list_all(self) -> List[Transaction]:
        with self._lock:
            return list(self._storage)
