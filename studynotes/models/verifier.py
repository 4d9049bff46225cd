from datetime import datetime, timezone
from typing import Any, Dict, List
import logging
import math

from studynotes.config import Config
from studynotes.errors import VerificationError
from studynotes.models.llm_client import call_llm, parse_json_or_throw, LLMConfig

logger = logging.getLogger(__name__)


VERDICTS = ("correct", "incorrect", "partially_correct", "unclear")
SEVERITIES = ("critical", "major", "minor", "info")

VERIFIER_SYSTEM_PROMPT = (
    "You are a rigorous fact-checker. Analyze evidence from multiple sources and determine if the "
    "claim is correct, incorrect, or needs clarification. Be strict and evidence-based."
)

VERIFICATION_PROMPT = """주장(Claim)을 검증해주세요.

**검증할 주장:**
"{claim}"

**카테고리:** {category}
**타입:** {type}

**수집된 증거 ({n_sources}개 출처):**
{sources}

**검증 요구사항:**

1. **Verdict (판정):**
   - correct: 주장이 정확함 (모든 출처가 일치)
   - incorrect: 주장이 틀림 (출처들이 반박)
   - partially_correct: 부분적으로 맞음 (세부사항 오류)
   - unclear: 출처가 불충분하거나 상충됨

2. **Confidence (신뢰도):** 0.0-1.0
   - 1.0: 3+ high-reliability sources agree
   - 0.8: 2+ sources agree
   - 0.6: Mixed evidence
   - 0.4: Conflicting sources
   - 0.2: Insufficient evidence

3. **Severity (심각도):**
   - critical: 근본적으로 틀린 개념 (시험/실무에서 문제)
   - major: 중요한 오류 (이해에 영향)
   - minor: 사소한 부정확성 (큰 영향 없음)
   - info: 추가 설명 필요 (틀리진 않지만 불완전)

Return ONLY valid JSON:
{{
  "verdict": "correct|incorrect|partially_correct|unclear",
  "confidence": 0.85,
  "explanation": "상세한 검증 설명 (왜 이런 판정을 내렸는지)",
  "correction": "틀렸다면, 정확한 정보는 무엇인지 (verdict가 incorrect/partially_correct일 때만)",
  "severity": "critical|major|minor|info",
  "sourceAgreement": {{
    "total": 0,
    "supporting": 0,
    "refuting": 0,
    "unclear": 0
  }},
  "recommendations": ["학생에게 줄 추천사항/조언"]
}}"""


def default_verification_config() -> LLMConfig:
    return LLMConfig(
        model=Config.VERIFICATION_MODEL,
        max_completion_tokens=1500,
        temperature=0.2,
    )


def format_sources(sources: List[Dict[str, Any]]) -> str:
    blocks = []
    for idx, source in enumerate(sources, 1):
        lines = [
            f"Source {idx} [{str(source.get('type', 'unknown')).upper()} - "
            f"{source.get('reliability')} reliability]:",
            f"Title: {source.get('title')}",
        ]
        if source.get("verdict"):
            lines.append(f"Verdict: {source['verdict']}")
        lines.append(f"Excerpt: {source.get('excerpt')}")
        if source.get("citations"):
            lines.append(f"Citations: {source['citations']}")
        blocks.append("\n".join(lines))

    return "\n---\n".join(blocks)


def build_verification_prompt(claim: Dict[str, Any], evidence: Dict[str, Any]) -> str:
    sources = evidence.get("sources") or []
    return VERIFICATION_PROMPT.format(
        claim=claim.get("text", ""),
        category=claim.get("category"),
        type=claim.get("type"),
        n_sources=len(sources),
        sources=format_sources(sources),
    )


def _clamp_confidence(value: Any) -> float:
    try:
        conf = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(conf):
        return 0.0
    return max(0.0, min(1.0, conf))


def normalize_verification(claim_id: Any, data: Dict[str, Any]) -> Dict[str, Any]:
    verdict = data.get("verdict")
    if verdict not in VERDICTS:
        logger.warning("Claim %s: unexpected verdict %r, using 'unclear'", claim_id, verdict)
        verdict = "unclear"

    severity = data.get("severity")
    if severity not in SEVERITIES:
        severity = "info"

    return {
        "claim_id": claim_id,
        "verdict": verdict,
        "confidence": _clamp_confidence(data.get("confidence")),
        "explanation": data.get("explanation") or "",
        "correction": data.get("correction") or None,
        "severity": severity,
        "source_agreement": data.get("sourceAgreement") or {},
        "recommendations": data.get("recommendations") or [],
        "verified_at": datetime.now(timezone.utc).isoformat(),
    }


# Agent 3: fact verifier
def verify_claim(
    claim: Dict[str, Any],
    evidence: Dict[str, Any],
    cfg: LLMConfig | None = None,
) -> Dict[str, Any]:

    cfg = cfg or default_verification_config()

    try:
        raw = call_llm(
            system_prompt=VERIFIER_SYSTEM_PROMPT,
            user_prompt=build_verification_prompt(claim, evidence),
            cfg=cfg,
            json_mode=True,
        )
        data = parse_json_or_throw(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return normalize_verification(claim.get("id"), data)
    except Exception as e:
        logger.error("Verification error for claim %s: %s", claim.get("id"), e)
        raise VerificationError(f"Failed to verify claim: {e}") from e
