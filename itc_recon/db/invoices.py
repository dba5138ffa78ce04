from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
import threading
import logging
from itc_recon.schemas.invoice import Invoice
from itc_recon.core.errors import UniqueConstraintViolation

logger = logging.getLogger(__name__)

class InvoiceStore(ABC):
    """
    Durable invoice records.

    Implementations must enforce (invoice_number, supplier_gstin) uniqueness
    atomically inside ``insert`` and raise UniqueConstraintViolation when it
    would be broken. Other write failures raise PersistenceError.
    """

    @abstractmethod
    def find_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        pass

    @abstractmethod
    def insert(self, invoice: Invoice) -> Invoice:
        pass

    @abstractmethod
    def list_all(self) -> List[Invoice]:
        pass

class InMemoryInvoiceStore(InvoiceStore):
    def __init__(self):
        self._storage: Dict[Tuple[str, str], Invoice] = {}
        self._lock = threading.Lock()

    def find_by_invoice_number(self, invoice_number: str) -> Optional[Invoice]:
        with self._lock:
            # Latest submission wins when several suppliers share a number
            matches = [inv for (number, _), inv in self._storage.items() if number == invoice_number]
        return matches[-1] if matches else None

    def insert(self, invoice: Invoice) -> Invoice:
        key = (invoice.invoice_number, invoice.supplier_gstin)
        with self._lock:
            if key in self._storage:
                raise UniqueConstraintViolation(
                    f"Invoice {invoice.invoice_number} from {invoice.supplier_gstin} already exists"
                )
            stored = invoice.model_copy(deep=True)
            self._storage[key] = stored
        logger.debug(f"Invoice stored: {key}")
        return stored

    def list_all(self) -> List[Invoice]:
        with self._lock:
            return list(self._storage.values())
