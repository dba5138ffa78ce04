from typing import Optional
from itc_recon.schemas.invoice import TaxAmounts

class ReturnRecord(TaxAmounts):
    """A supplier-reported transaction as published in the GSTR-2B dataset."""
    supplier_name: Optional[str] = None
