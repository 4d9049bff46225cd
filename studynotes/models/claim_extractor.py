from datetime import datetime, timezone
from typing import Any, Dict, List
import logging

from studynotes.config import Config
from studynotes.errors import ClaimExtractionError
from studynotes.models.llm_client import call_llm, parse_json_or_throw, LLMConfig
from studynotes.utils.text import truncate_text

logger = logging.getLogger(__name__)


EXTRACTION_SYSTEM_PROMPT = (
    "You are a fact extraction expert. Extract only verifiable, objective claims that can be "
    "fact-checked against authoritative sources. Ignore subjective opinions, examples, and explanations."
)

#prompts
CLAIM_EXTRACTION_PROMPT = """다음 강의 노트에서 사실 확인이 가능한 주장(claims)만 추출해주세요.

**과목:** {subject}

**노트 내용:**
{note}

**추출 대상 (ONLY extract these types):**

1. **정의 (definition)** - "X는 Y이다"
   예: "프로세스는 실행 중인 프로그램이다"
2. **수치/날짜 (numerical)** - 구체적인 숫자, 날짜, 통계
   예: "TCP는 3-way handshake를 사용한다"
3. **관계/인과 (relationship)** - X는 Y를 초래한다, X는 Y보다 빠르다
   예: "해시 테이블은 O(1)의 검색 시간을 가진다"
4. **속성/특징 (property)** - X는 Y 속성을 가진다
   예: "Python은 동적 타이핑 언어이다"
5. **공식/정리 (formula)** - 수학 공식, 알고리즘 복잡도
   예: "퀵소트의 평균 시간 복잡도는 O(n log n)이다"

**제외 대상 (DO NOT extract):**
- 주관적 의견 ("이해하기 쉽다", "중요하다")
- 예시/샘플 코드
- 강의 메타정보 ("다음 주에 배울 것", "시험에 나옴")
- 불명확한 진술 ("아마도", "~인 것 같다")

Return ONLY valid JSON:
{{
  "claims": [
    {{
      "id": 1,
      "text": "추출된 주장의 원문",
      "type": "definition|numerical|relationship|property|formula",
      "category": "주제 카테고리 (e.g., 프로세스 관리, 자료구조)",
      "keywords": ["핵심", "키워드"],
      "verifiable": true,
      "priority": "high|medium|low",
      "context": "주장이 나타난 문맥 (앞뒤 1-2문장)"
    }}
  ],
  "metadata": {{
    "totalClaims": 0,
    "claimTypes": {{"definition": 0, "numerical": 0, "relationship": 0, "property": 0, "formula": 0}}
  }}
}}

**중요:**
- 각 주장은 독립적으로 검증 가능해야 함
- 모호하거나 불명확한 주장은 제외
- 핵심 개념만 추출 (사소한 세부사항 제외)
- 우선순위: 시험/학습에 중요한 주장 = high"""

DEFAULT_SUBJECT = "일반"


def default_extraction_config() -> LLMConfig:
    return LLMConfig(
        model=Config.EXTRACTION_MODEL,
        max_completion_tokens=2000,
        temperature=0.2,
    )


def build_claim_extraction_prompt(note_content: str, subject: str | None = None) -> str:
    return CLAIM_EXTRACTION_PROMPT.format(
        subject=subject or DEFAULT_SUBJECT,
        note=truncate_text(note_content, Config.CLAIM_MAX_CHARS),
    )


def format_extracted_claims(claims_data: Dict[str, Any], original_content: str) -> Dict[str, Any]:
    """Normalise the model's claim list into pending claim records."""
    raw_claims = claims_data.get("claims") if isinstance(claims_data, dict) else None
    if not isinstance(raw_claims, list):
        raise ClaimExtractionError("Invalid claims data format")

    claims: List[Dict[str, Any]] = []
    for idx, claim in enumerate(raw_claims, 1):
        claims.append({
            "id": claim.get("id") or idx,
            "text": claim.get("text", ""),
            "type": claim.get("type"),
            "category": claim.get("category"),
            "keywords": claim.get("keywords") or [],
            "verifiable": claim.get("verifiable") is not False,
            "priority": claim.get("priority") or "medium",
            "context": claim.get("context") or "",
            "status": "pending",
            "confidence": None,
            "sources": [],
        })

    model_meta = claims_data.get("metadata") or {}

    return {
        "claims": claims,
        "metadata": {
            "total_claims": len(claims),
            "claim_types": model_meta.get("claimTypes") or {},
            "extracted_at": datetime.now(timezone.utc).isoformat(),
            "original_length": len(original_content),
        },
    }


# Agent 1: claim extractor
def extract_claims(
    note_content: str,
    subject: str | None = None,
    cfg: LLMConfig | None = None,
) -> Dict[str, Any]:

    cfg = cfg or default_extraction_config()

    try:
        raw = call_llm(
            system_prompt=EXTRACTION_SYSTEM_PROMPT,
            user_prompt=build_claim_extraction_prompt(note_content, subject),
            cfg=cfg,
            json_mode=True,
        )
        return format_extracted_claims(parse_json_or_throw(raw), note_content)
    except Exception as e:
        logger.error("Claim extraction error: %s", e)
        raise ClaimExtractionError(f"Failed to extract claims: {e}") from e
