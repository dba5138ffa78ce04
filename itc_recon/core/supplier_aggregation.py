from decimal import Decimal
from typing import List, Dict, Any, Iterable
from itc_recon.schemas.supplier import SupplierRiskSummary, SupplierRiskLevel
from itc_recon.schemas.reconciliation import ReconciliationStatus, Transaction

RISK_ORDER = {SupplierRiskLevel.HIGH: 0, SupplierRiskLevel.MEDIUM: 1, SupplierRiskLevel.LOW: 2}

def aggregate_supplier_risk(transactions: Iterable[Transaction]) -> List[SupplierRiskSummary]:
    """
    Aggregates existing reconciliation rows by supplier GSTIN.
    DOES NOT perform any new reconciliation logic.
    """
    supplier_map: Dict[str, Dict[str, Any]] = {}

    for txn in transactions:
        gstin = txn.supplier_gstin
        if gstin not in supplier_map:
            supplier_map[gstin] = {
                "total_invoices": 0,
                ReconciliationStatus.MATCHED: 0,
                ReconciliationStatus.PARTIAL: 0,
                ReconciliationStatus.UNMATCHED: 0,
                "claimed": Decimal("0"),
                "substantiated": Decimal("0"),
            }

        data = supplier_map[gstin]
        data["total_invoices"] += 1
        data[txn.status] += 1
        data["claimed"] += txn.amount
        if txn.status == ReconciliationStatus.MATCHED:
            data["substantiated"] += txn.amount

    summaries = []
    for gstin, data in supplier_map.items():
        if data[ReconciliationStatus.UNMATCHED] > 0:
            risk_level = SupplierRiskLevel.HIGH
        elif data[ReconciliationStatus.PARTIAL] > 0:
            risk_level = SupplierRiskLevel.MEDIUM
        else:
            risk_level = SupplierRiskLevel.LOW

        summaries.append(SupplierRiskSummary(
            supplier_gstin=gstin,
            total_invoices=data["total_invoices"],
            matched_count=data[ReconciliationStatus.MATCHED],
            partial_count=data[ReconciliationStatus.PARTIAL],
            unmatched_count=data[ReconciliationStatus.UNMATCHED],
            claimed_itc_amount=data["claimed"],
            substantiated_itc_amount=data["substantiated"],
            at_risk_itc_amount=data["claimed"] - data["substantiated"],
            risk_level=risk_level
        ))

    return sorted(summaries, key=lambda x: (RISK_ORDER[x.risk_level], -x.at_risk_itc_amount))
