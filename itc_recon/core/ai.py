from openai import OpenAI, OpenAIError
import json
import logging
from pydantic import ValidationError
from itc_recon.schemas.explanation import ExplainRequest, ExplainResponse
from itc_recon.core.config import settings

logger = logging.getLogger(__name__)

# Initialize client (assumes OPENAI_API_KEY env var is set)
try:
    client = OpenAI()
except OpenAIError:
    client = None
    logger.warning("OpenAI client could not be initialized. Mismatch explanations will respond with fallback.")

SYSTEM_PROMPT = """
You are a read-only reconciliation analyst for an Input Tax Credit (ITC) compliance system.
Your goal is to explain why a purchase invoice is partially matched or unmatched against the
supplier's GSTR-2B record, based strictly on the provided data.

RULES:
1. DO NOT change the reconciliation status.
2. DO NOT perform new calculations or invent numbers.
3. DO NOT advise on tax filing compliance (legal advice).
4. Output valid JSON only.

OUTPUT FORMAT:
{
  "explanation": "Plain English explanation...",
  "root_cause": "Category (e.g., Data Entry Error, Timing Issue, Supplier Non-Filing)",
  "suggested_action": "Action (e.g., Contact Supplier, Verify Amounts, Defer Claim)"
}
"""

def _fallback(request: ExplainRequest) -> ExplainResponse:
    return ExplainResponse(
        explanation="Automated explanation unavailable. Please review manually.",
        root_cause="System Limitation",
        suggested_action="Manual Review",
        original_status=request.status
    )

def generate_explanation(request: ExplainRequest) -> ExplainResponse:
    if not client:
        return _fallback(request)

    user_content = f"""
    Status: {request.status.value}
    Invoice: {request.invoice_number} (Supplier GSTIN: {request.supplier_gstin})
    Differences (invoice minus GSTR-2B): {json.dumps(request.factual_diffs, default=str)}

    Explain this situation.
    """

    try:
        response = client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": user_content}
            ],
            temperature=0.0, # Deterministic output
            response_format={"type": "json_object"}
        )
        data = json.loads(response.choices[0].message.content)
        if not isinstance(data, dict):
            raise TypeError(f"expected a JSON object, got {type(data).__name__}")

        # The status always comes from the reconciliation engine, never from the model
        return ExplainResponse(
            explanation=data.get("explanation") or "No explanation provided.",
            root_cause=data.get("root_cause") or "Unknown",
            suggested_action=data.get("suggested_action") or "Review",
            original_status=request.status
        )
    except (OpenAIError, json.JSONDecodeError, TypeError, ValidationError) as e:
        logger.error(f"AI Generation Failed: {e}")
        return _fallback(request)
