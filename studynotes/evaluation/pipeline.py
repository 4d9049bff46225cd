from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List
import logging
import time

from studynotes.config import Config
from studynotes.errors import FactCheckError
from studynotes.models.claim_extractor import extract_claims
from studynotes.models.evidence import retrieve_evidence
from studynotes.models.verifier import verify_claim
from studynotes.evaluation.scoring import generate_fact_check_report
from studynotes.utils.signals import compute_claim_grounding

logger = logging.getLogger(__name__)

CHECKED_PRIORITIES = ("high", "medium")


# Agent 2 + 3 for one claim
def check_claim(claim: Dict[str, Any]) -> Dict[str, Any]:
    evidence = retrieve_evidence(claim)
    verification = verify_claim(claim, evidence)
    return {"evidence": evidence, "verification": verification}


def _verify_one(claim: Dict[str, Any]) -> Dict[str, Any]:
    try:
        logger.info("Verifying claim %s: %r", claim.get("id"), str(claim.get("text", ""))[:50])
        result = check_claim(claim)
        return {
            **claim,
            **result["verification"],
            "sources": result["evidence"]["sources"],
        }
    except Exception as e:
        logger.error("Error verifying claim %s: %s", claim.get("id"), e)
        return {
            **claim,
            "verdict": "error",
            "confidence": 0,
            "explanation": f"Verification failed: {e}",
            "severity": "info",
        }


def select_claims(claims: List[Dict[str, Any]], check_all: bool = False) -> List[Dict[str, Any]]:
    if check_all:
        return list(claims)
    return [c for c in claims if c.get("priority") in CHECKED_PRIORITIES]


# Verify claims batch by batch; order is preserved
def verify_in_batches(
    claims: List[Dict[str, Any]],
    batch_size: int = 3,
    batch_delay: float = 1.0,
) -> List[Dict[str, Any]]:

    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")

    verified: List[Dict[str, Any]] = []

    for start in range(0, len(claims), batch_size):
        batch = claims[start:start + batch_size]

        with ThreadPoolExecutor(max_workers=len(batch)) as executor:
            verified.extend(executor.map(_verify_one, batch))

        # Naive rate limiting between batches
        if start + batch_size < len(claims) and batch_delay > 0:
            time.sleep(batch_delay)

    return verified


# Fact-check pipeline for one note
def fact_check_note(
    note_content: str,
    subject: str | None = None,
    check_all: bool = False,
    batch_size: int | None = None,
    batch_delay: float | None = None,
) -> Dict[str, Any]:

    batch_size = Config.FACT_CHECK_BATCH_SIZE if batch_size is None else batch_size
    batch_delay = Config.FACT_CHECK_BATCH_DELAY if batch_delay is None else batch_delay

    logger.info("Starting fact-check pipeline...")

    try:
        extracted = extract_claims(note_content, subject)
    except Exception as e:
        logger.error("Fact-check pipeline error: %s", e)
        raise FactCheckError(f"Failed to fact-check note: {e}") from e

    claims = extracted["claims"]
    logger.info("Extracted %d claims", len(claims))

    to_check = select_claims(claims, check_all)
    logger.info("Checking %d claims...", len(to_check))

    verified = verify_in_batches(to_check, batch_size=batch_size, batch_delay=batch_delay)

    report = generate_fact_check_report(verified)

    return {
        "claims": verified,
        "report": report,
        "metadata": {
            **extracted["metadata"],
            "checked_claims": len(verified),
            "completed_at": datetime.now(timezone.utc).isoformat(),
            "grounding": compute_claim_grounding(
                note_content, claims, threshold=Config.GROUNDING_THRESHOLD
            ),
        },
    }
