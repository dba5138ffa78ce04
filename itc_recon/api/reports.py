from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from decimal import Decimal
import uuid
import logging
import io
import hashlib
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib import colors
from itc_recon.api.deps import get_stores
from itc_recon.core.config import settings
from itc_recon.core.reconciliation import summarize
from itc_recon.core.supplier_aggregation import aggregate_supplier_risk
from itc_recon.db.memory import Stores
from itc_recon.schemas.report import CreditTotals, ReportAudit, ReportResponse

router = APIRouter()
logger = logging.getLogger(__name__)

# Row cap for the detail tables in both formats
DETAIL_LIMIT = 100

def build_report(stores: Stores) -> ReportResponse:
    """Assemble report data shared by the JSON and PDF endpoints."""
    transactions = stores.transactions.list_all()
    if not transactions:
        raise HTTPException(status_code=404, detail="No reconciliation results found. Run reconciliation first.")

    suppliers = aggregate_supplier_risk(transactions)
    claimed = sum((s.claimed_itc_amount for s in suppliers), Decimal("0"))
    substantiated = sum((s.substantiated_itc_amount for s in suppliers), Decimal("0"))
    credit = CreditTotals(
        claimed_itc_amount=claimed,
        substantiated_itc_amount=substantiated,
        at_risk_itc_amount=claimed - substantiated,
    )

    return ReportResponse(
        summary=summarize(transactions),
        credit=credit,
        supplier_summary=suppliers,
        transactions=transactions[:DETAIL_LIMIT],
        compliance_checks=stores.compliance.list_all()[-DETAIL_LIMIT:],
        audit=ReportAudit(
            report_id=str(uuid.uuid4()),
            return_dataset=settings.RETURN_DATASET_NAME,
            amount_tolerance=transactions[0].amount_tolerance,
        ),
    )

@router.get("/reports/reconciliation", response_model=ReportResponse)
async def get_reconciliation_report(stores: Stores = Depends(get_stores)):
    logger.info("JSON Report requested")
    return build_report(stores)

def _table(data, col_widths):
    table = Table(data, colWidths=col_widths)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.navy),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey)
    ]))
    return table

@router.get("/reports/reconciliation/pdf")
async def get_reconciliation_pdf_report(stores: Stores = Depends(get_stores)):
    logger.info("PDF Report Generation STARTED")
    report = build_report(stores)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4)
    styles = getSampleStyleSheet()
    elements = []

    # 1. Header
    elements.append(Paragraph("ITC Reconciliation Report", styles['Title']))
    elements.append(Spacer(1, 12))
    elements.append(Paragraph(f"<b>Return dataset:</b> {report.audit.return_dataset}", styles['Normal']))
    elements.append(Paragraph(f"<b>Amount tolerance:</b> {report.audit.amount_tolerance}", styles['Normal']))
    elements.append(Paragraph(f"<b>Generated:</b> {report.audit.generated_at.strftime('%Y-%m-%d %H:%M:%S')}", styles['Normal']))
    elements.append(Spacer(1, 24))

    # 2. Summary
    elements.append(Paragraph("Transaction Summary", styles['Heading2']))
    elements.append(_table([
        ["Metric", "Value"],
        ["Total Transactions", str(report.summary.total)],
        ["Matched", str(report.summary.matched_count)],
        ["Unmatched", str(report.summary.unmatched_count)],
        ["Partially Matched", str(report.summary.partial_count)],
        ["Claimed ITC", f"Rs. {report.credit.claimed_itc_amount:.2f}"],
        ["Substantiated ITC", f"Rs. {report.credit.substantiated_itc_amount:.2f}"],
        ["ITC at Risk", f"Rs. {report.credit.at_risk_itc_amount:.2f}"],
    ], [200, 150]))
    elements.append(Spacer(1, 24))

    # 3. Suppliers
    elements.append(Paragraph("Supplier Risk", styles['Heading2']))
    elements.append(_table(
        [["Supplier GSTIN", "Invoices", "Unmatched", "Partial", "ITC at Risk", "Risk"]] + [
            [s.supplier_gstin, str(s.total_invoices), str(s.unmatched_count), str(s.partial_count),
             f"Rs. {s.at_risk_itc_amount:.2f}", s.risk_level.value]
            for s in report.supplier_summary
        ],
        [110, 55, 60, 50, 90, 50]
    ))
    elements.append(Spacer(1, 24))

    # 4. Transactions
    elements.append(Paragraph("Transactions", styles['Heading2']))
    elements.append(_table(
        [["Date", "Invoice", "Amount", "Status", "In GSTR-2B", "Match", "Supplier"]] + [
            [str(t.date or "-"), t.invoice_number, f"Rs. {t.amount:.2f}", t.status.value.capitalize(),
             "Yes" if t.found_in_return_dataset else "No", "Yes" if t.invoice_match else "No",
             t.supplier_details]
            for t in report.transactions
        ],
        [55, 65, 60, 55, 50, 40, 160]
    ))

    # 5. Mandatory Footer
    elements.append(Spacer(1, 48))
    footer_text = "This report is for internal compliance only. Eligibility is substantiated solely by supplier-filed GSTR-2B records."
    elements.append(Paragraph(footer_text, ParagraphStyle(name='Footer', fontSize=8, textColor=colors.grey, alignment=1)))

    try:
        doc.build(elements)
    except Exception as e:
        logger.error(f"PDF Build Failed: {str(e)}")
        raise HTTPException(status_code=500, detail="PDF generation failed during document build.")

    pdf_bytes = buffer.getvalue()
    logger.info(f"PDF Report generated: {report.audit.report_id} sha256={hashlib.sha256(pdf_bytes).hexdigest()}")

    buffer.seek(0)
    return StreamingResponse(
        buffer,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename=ITC_Reconciliation_{report.audit.report_id[:8]}.pdf",
            "Content-Length": str(len(pdf_bytes))
        }
    )
