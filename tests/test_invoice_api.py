import pytest
from fastapi.testclient import TestClient
from itc_recon.core import errors
from itc_recon.db.memory import Stores
from itc_recon.db.returns import InMemoryReturnDataset
from itc_recon.main import create_app
from itc_recon.schemas.gstr2b import ReturnRecord
import csv
import io


@pytest.fixture
def stores():
    stores = Stores()
    stores.returns.replace_all([
        ReturnRecord(invoice_number="INV-200", supplier_gstin="29AAAAA0000A1Z5", cgst=100, sgst=100, igst=0),
    ])
    return stores


@pytest.fixture
def client(stores):
    return TestClient(create_app(stores))


def create_csv_content(rows):
    output = io.StringIO()
    writer = csv.DictWriter(output, fieldnames=rows[0].keys())
    writer.writeheader()
    writer.writerows(rows)
    return output.getvalue().encode('utf-8')


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_eligible_invoice(client):
    payload = {"invoice_number": "INV-200", "supplier_gstin": "29AAAAA0000A1Z5", "cgst": 100, "sgst": 100, "igst": 0}
    response = client.post("/invoices/eligibility", json=payload)
    assert response.status_code == 200

    data = response.json()
    assert data["kind"] == "DETERMINED"
    verdict = data["verdict"]
    assert verdict["is_eligible"] is True
    assert verdict["verification_status"] == "VERIFIED"
    assert float(verdict["eligible_amount"]) == 200
    assert verdict["reasons"] == []


def test_ineligible_invoice_is_a_determination_not_an_error(client):
    payload = {"invoice_number": "INV-404", "supplier_gstin": "29AAAAA0000A1Z5", "cgst": 100, "sgst": 100}
    response = client.post("/invoices/eligibility", json=payload)
    assert response.status_code == 200

    verdict = response.json()["verdict"]
    assert verdict["is_eligible"] is False
    assert verdict["verification_status"] == "NOT_FOUND"
    assert float(verdict["eligible_amount"]) == 0
    assert verdict["reasons"] == ["Invoice not found in GSTR-2B"]


def test_blank_invoice_number_is_422(client, stores):
    response = client.post("/invoices/eligibility", json={"invoice_number": " ", "supplier_gstin": "29AAAAA0000A1Z5"})
    assert response.status_code == 422
    assert response.json()["detail"]["error_kind"] == "VALIDATION_ERROR"
    assert stores.invoices.list_all() == []
    assert stores.compliance.list_all() == []


def test_duplicate_is_409_and_other_supplier_is_allowed(client):
    payload = {"invoice_number": "INV-100", "supplier_gstin": "29ABCDE1234F1Z5"}
    assert client.post("/invoices/eligibility", json=payload).status_code == 200

    response = client.post("/invoices/eligibility", json=payload)
    assert response.status_code == 409
    assert response.json()["detail"]["error_kind"] == "DUPLICATE_INVOICE"

    other = {"invoice_number": "INV-100", "supplier_gstin": "27XYZAB5678G1Z3"}
    assert client.post("/invoices/eligibility", json=other).status_code == 200


def test_lookup_failure_is_503_inconclusive():
    class BrokenDataset(InMemoryReturnDataset):
        def find(self, invoice_number, supplier_gstin):
            raise errors.ReturnLookupError("Error fetching GSTR-2B data")

    client = TestClient(create_app(Stores(returns=BrokenDataset())))
    payload = {"invoice_number": "INV-1", "supplier_gstin": "29AAAAA0000A1Z5"}
    response = client.post("/invoices/eligibility", json=payload)

    assert response.status_code == 503
    detail = response.json()["detail"]
    assert detail["kind"] == "INCONCLUSIVE"
    assert detail["error_kind"] == "LOOKUP_ERROR"
    assert detail["verdict"] is None


def test_csv_upload_reports_each_row(client, stores):
    data = [
        {"invoice_no": "INV-200", "gstin": "29AAAAA0000A1Z5", "invoice_date": "2024-04-01", "cgst": "100", "sgst": "100", "igst": "0"},
        {"invoice_no": "INV-201", "gstin": "29AAAAA0000A1Z5", "invoice_date": "2024-04-02", "cgst": "9", "sgst": "9", "igst": "0"},
        {"invoice_no": "INV-200", "gstin": "29AAAAA0000A1Z5", "invoice_date": "2024-04-01", "cgst": "100", "sgst": "100", "igst": "0"},
        {"invoice_no": "INV-202", "gstin": "29AAAAA0000A1Z5", "invoice_date": "25-10-2023", "cgst": "9", "sgst": "9", "igst": "0"},
    ]
    files = {"file": ("invoices.csv", create_csv_content(data), "text/csv")}
    response = client.post("/invoices/upload", files=files)
    assert response.status_code == 200

    body = response.json()
    assert body["total_invoices"] == 4
    assert body["eligible_count"] == 1
    assert body["outcome_counts"] == {"DETERMINED": 2, "REJECTED": 2, "INCONCLUSIVE": 0}
    assert [o["error_kind"] for o in body["outcomes"]] == [None, None, "DUPLICATE_INVOICE", "VALIDATION_ERROR"]
    assert "YYYY-MM-DD" in body["outcomes"][3]["detail"]
    assert len(stores.invoices.list_all()) == 2


def test_csv_upload_rejects_non_csv(client):
    files = {"file": ("invoices.txt", b"hello", "text/plain")}
    response = client.post("/invoices/upload", files=files)
    assert response.status_code == 400


def test_csv_upload_row_limit(client, monkeypatch):
    from itc_recon.core.config import settings
    monkeypatch.setattr(settings, "MAX_UPLOAD_ROWS", 2)
    rows = [{"invoice_no": f"INV-{i}", "gstin": "29AAAAA0000A1Z5", "cgst": "1"} for i in range(3)]
    files = {"file": ("invoices.csv", create_csv_content(rows), "text/csv")}
    assert client.post("/invoices/upload", files=files).status_code == 413


def test_list_invoices(client):
    client.post("/invoices/eligibility", json={"invoice_number": "INV-9", "supplier_gstin": "29AAAAA0000A1Z5"})
    invoices = client.get("/invoices").json()
    assert [i["invoice_number"] for i in invoices] == ["INV-9"]


def test_unknown_invoice_fields_are_not_stored(client):
    payload = {"invoice_number": "INV-10", "supplier_gstin": "29AAAAA0000A1Z5", "source": "erp"}
    assert client.post("/invoices/eligibility", json=payload).status_code == 200
    invoices = client.get("/invoices").json()
    assert "source" not in invoices[0]
