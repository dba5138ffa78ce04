import pytest
from fastapi.testclient import TestClient
from itc_recon.core import errors
from itc_recon.db.memory import Stores
from itc_recon.db.returns import InMemoryReturnDataset
from itc_recon.main import create_app
from itc_recon.schemas.invoice import Invoice
from itc_recon.schemas.supplier import SupplierRiskLevel

RETURNS_CSV = (
    "invoice_no,gstin,supplier_name,invoice_date,taxable_value,cgst,sgst,igst\n"
    "INV-2024-001,27AAAAA0000A1Z5,Acme Traders,2024-01-01,1000.00,0,0,180.00\n"
    "INV-2024-002,27BBBBB1111B1Z5,Bharat Supplies,2024-01-02,2000.00,90.00,90.00,0\n"
)

INVOICES_CSV = (
    "invoice_no,gstin,taxable_value,igst,cgst,sgst,invoice_date\n"
    "INV-2024-001,27AAAAA0000A1Z5,1000.00,180.00,0,0,2024-01-01\n"
    "INV-2024-002,27BBBBB1111B1Z5,2000.00,0,95.00,95.00,2024-01-02\n"
    "INV-2024-003,27CCCCC2222C1Z5,1500.00,270.00,0,0,2024-01-03\n"
)


@pytest.fixture
def client():
    client = TestClient(create_app())
    res = client.post("/gstr2b/upload", files={"file": ("gstr2b.csv", RETURNS_CSV, "text/csv")})
    assert res.status_code == 200, res.text
    assert res.json()["total_records"] == 2
    res = client.post("/invoices/upload", files={"file": ("invoices.csv", INVOICES_CSV, "text/csv")})
    assert res.status_code == 200, res.text
    return client


def test_return_dataset_listing(client):
    records = client.get("/gstr2b").json()
    assert {r["supplier_name"] for r in records} == {"Acme Traders", "Bharat Supplies"}


def test_return_dataset_rejects_bad_rows():
    client = TestClient(create_app())
    bad_csv = "invoice_no,gstin,cgst\nINV-1,27AAAAA0000A1Z5,12abc\n"
    response = client.post("/gstr2b/upload", files={"file": ("bad.csv", bad_csv, "text/csv")})
    assert response.status_code == 400
    assert "Row 2" in response.json()["detail"]


def test_run_reconciliation(client):
    response = client.post("/reconciliation/run")
    assert response.status_code == 200
    assert response.json() == {"matched_count": 1, "unmatched_count": 1, "partial_count": 1, "total": 3}

    rows = {t["invoice_number"]: t for t in client.get("/reconciliation/transactions").json()}
    assert rows["INV-2024-001"]["status"] == "matched"
    assert rows["INV-2024-001"]["supplier_details"] == "Acme Traders (27AAAAA0000A1Z5)"
    assert rows["INV-2024-002"]["status"] == "partial"
    assert rows["INV-2024-002"]["found_in_return_dataset"] is True
    assert rows["INV-2024-002"]["invoice_match"] is False
    assert rows["INV-2024-003"]["status"] == "unmatched"
    assert rows["INV-2024-003"]["found_in_return_dataset"] is False

    assert client.get("/reconciliation/summary").json()["total"] == 3


def test_tolerance_widens_match(client):
    response = client.post("/reconciliation/run", params={"tolerance": "5"})
    assert response.json()["matched_count"] == 2
    assert response.json()["partial_count"] == 0


def test_summary_before_any_run_is_empty():
    client = TestClient(create_app())
    assert client.get("/reconciliation/summary").json() == {
        "matched_count": 0, "unmatched_count": 0, "partial_count": 0, "total": 0
    }


def test_run_with_broken_dataset_is_503():
    class BrokenDataset(InMemoryReturnDataset):
        def find(self, invoice_number, supplier_gstin):
            raise errors.ReturnLookupError("Error fetching GSTR-2B data")

    stores = Stores(returns=BrokenDataset())
    stores.invoices.insert(Invoice(invoice_number="INV-1", supplier_gstin="27AAAAA0000A1Z5"))
    client = TestClient(create_app(stores))

    response = client.post("/reconciliation/run")
    assert response.status_code == 503
    assert response.json()["detail"]["error_kind"] == "LOOKUP_ERROR"
    assert stores.transactions.list_all() == []


def test_report_json(client):
    client.post("/reconciliation/run")
    response = client.get("/reports/reconciliation")
    assert response.status_code == 200
    report = response.json()

    for section in ["summary", "credit", "supplier_summary", "transactions", "compliance_checks", "audit"]:
        assert section in report, f"Missing required section: {section}"

    assert report["summary"]["total"] == 3
    assert float(report["credit"]["claimed_itc_amount"]) == 180 + 190 + 270
    assert float(report["credit"]["substantiated_itc_amount"]) == 180
    assert float(report["credit"]["at_risk_itc_amount"]) == 460

    levels = [s["risk_level"] for s in report["supplier_summary"]]
    assert levels == [SupplierRiskLevel.HIGH.value, SupplierRiskLevel.MEDIUM.value, SupplierRiskLevel.LOW.value]

    # One ITC_ELIGIBILITY check per uploaded invoice
    assert len(report["compliance_checks"]) == 3
    assert report["audit"]["return_dataset"] == "GSTR-2B"
    assert "report_id" in report["audit"]


def test_report_shows_tolerance_of_last_run(client):
    client.post("/reconciliation/run")
    assert float(client.get("/reports/reconciliation").json()["audit"]["amount_tolerance"]) == 0

    client.post("/reconciliation/run", params={"tolerance": "5"})
    report = client.get("/reports/reconciliation").json()
    assert float(report["audit"]["amount_tolerance"]) == 5
    assert report["summary"]["matched_count"] == 2


def test_run_with_adapter_key_error_is_503():
    class KeyErrorDataset(InMemoryReturnDataset):
        def find(self, invoice_number, supplier_gstin):
            raise KeyError("gstr2b partition missing")

    stores = Stores(returns=KeyErrorDataset())
    stores.invoices.insert(Invoice(invoice_number="INV-1", supplier_gstin="27AAAAA0000A1Z5"))
    client = TestClient(create_app(stores))

    response = client.post("/reconciliation/run")
    assert response.status_code == 503
    assert response.json()["detail"]["error_kind"] == "LOOKUP_ERROR"


def test_report_not_found_before_run():
    client = TestClient(create_app())
    response = client.get("/reports/reconciliation")
    assert response.status_code == 404
    assert "detail" in response.json()


def test_pdf_report_download(client):
    client.post("/reconciliation/run")
    response = client.get("/reports/reconciliation/pdf")
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "attachment" in response.headers["content-disposition"]
    assert "ITC_Reconciliation" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")
