import threading
from concurrent.futures import ThreadPoolExecutor
from itc_recon.core import errors
from itc_recon.core.eligibility import EligibilityEvaluator
from itc_recon.db.invoices import InMemoryInvoiceStore
from itc_recon.db.returns import InMemoryReturnDataset

WORKERS = 8


class SlowReadStore(InMemoryInvoiceStore):
    """Holds every reader at a barrier so all of them pass the duplicate check before any insert."""
    def __init__(self, parties):
        super().__init__()
        self.barrier = threading.Barrier(parties)

    def find_by_invoice_number(self, invoice_number):
        found = super().find_by_invoice_number(invoice_number)
        self.barrier.wait(timeout=5)
        return found


def test_concurrent_submissions_of_same_pair_yield_one_success():
    store = SlowReadStore(WORKERS)
    evaluator = EligibilityEvaluator(store, InMemoryReturnDataset())
    invoice = {"invoice_number": "INV-100", "supplier_gstin": "29ABCDE1234F1Z5", "cgst": 9, "sgst": 9}

    def submit(_):
        try:
            evaluator.evaluate(invoice)
            return "ok"
        except errors.DuplicateInvoiceError:
            return "duplicate"

    with ThreadPoolExecutor(max_workers=WORKERS) as pool:
        results = list(pool.map(submit, range(WORKERS)))

    assert results.count("ok") == 1
    assert results.count("duplicate") == WORKERS - 1
    assert len(store.list_all()) == 1
