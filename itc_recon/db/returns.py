from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple
import threading
import logging
from itc_recon.schemas.gstr2b import ReturnRecord
from itc_recon.core.errors import ReturnLookupError

logger = logging.getLogger(__name__)

class ReturnDataset(ABC):
    """
    Read-only lookup into the GSTR-2B dataset.

    ``find`` returns None when no record exists and raises ReturnLookupError
    when the query itself fails. The two must never be conflated.
    """

    def lookup(self, invoice_number: str, supplier_gstin: str) -> Optional[ReturnRecord]:
        """``find`` with any LookupError an adapter raises reported as ReturnLookupError."""
        try:
            return self.find(invoice_number, supplier_gstin)
        except ReturnLookupError:
            raise
        except LookupError as e:
            raise ReturnLookupError(str(e) or "Return dataset lookup failed") from e

    @abstractmethod
    def find(self, invoice_number: str, supplier_gstin: str) -> Optional[ReturnRecord]:
        pass

    @abstractmethod
    def list_all(self) -> List[ReturnRecord]:
        pass

    def has_supplier(self, supplier_gstin: str) -> bool:
        return any(r.supplier_gstin == supplier_gstin for r in self.list_all())

class InMemoryReturnDataset(ReturnDataset):
    def __init__(self, records: Iterable[ReturnRecord] = ()):
        self._lock = threading.Lock()
        self._records: Dict[Tuple[str, str], ReturnRecord] = {}
        self.replace_all(records)

    def replace_all(self, records: Iterable[ReturnRecord]) -> int:
        """Out-of-band refresh: swap the whole dataset in one step."""
        snapshot = {(r.invoice_number, r.supplier_gstin): r for r in records}
        with self._lock:
            self._records = snapshot
        logger.info(f"Return dataset refreshed. Records: {len(snapshot)}")
        return len(snapshot)

    def find(self, invoice_number: str, supplier_gstin: str) -> Optional[ReturnRecord]:
        with self._lock:
            return self._records.get((invoice_number, supplier_gstin))

    def list_all(self) -> List[ReturnRecord]:
        with self._lock:
            return list(self._records.values())
