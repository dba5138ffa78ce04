from dataclasses import dataclass, field
from itc_recon.db.invoices import InMemoryInvoiceStore
from itc_recon.db.returns import InMemoryReturnDataset
from itc_recon.db.compliance import InMemoryComplianceCheckStore
from itc_recon.db.transactions import InMemoryTransactionStore

# One Stores instance per application. Components receive the individual
# stores through their constructors; nothing reads this module at import time.
@dataclass
class Stores:
    invoices: InMemoryInvoiceStore = field(default_factory=InMemoryInvoiceStore)
    returns: InMemoryReturnDataset = field(default_factory=InMemoryReturnDataset)
    compliance: InMemoryComplianceCheckStore = field(default_factory=InMemoryComplianceCheckStore)
    transactions: InMemoryTransactionStore = field(default_factory=InMemoryTransactionStore)
