from typing import Any, Dict, List
import logging
import re

from studynotes.config import Config
from studynotes.errors import SummaryError
from studynotes.models.llm_client import call_llm, LLMConfig
from studynotes.utils.text import truncate_text

logger = logging.getLogger(__name__)


SUMMARY_SYSTEM_PROMPT = (
    "You are an expert academic assistant helping students understand lecture notes. "
    "Provide clear, structured summaries in Korean that help students study effectively."
)

# Prompt for summarization model
SUMMARIZER_PROMPT = """아래 강의 노트를 분석하여 학생들이 효과적으로 학습할 수 있도록 요약해주세요.

**강의 정보:**
- 제목: {title}
- 과목: {subject}
- 교수님: {professor}
- 학기: {semester}

**노트 내용:**
{text}

다음 형식으로 응답해주세요 (각 섹션을 명확히 구분):

### 핵심 내용
- [핵심 포인트 1]
- [핵심 포인트 2]
- [핵심 포인트 3]

### 난이도
[입문/초급/중급/중상급/고급 중 하나]

### 예상 학습시간
[예: 30분, 1시간 등]

### 전체 요약
[2-3 문장으로 노트 전체 내용을 요약]

### 태그
[관련 키워드를 쉼표로 구분하여 나열]"""

MISSING_INFO = "정보 없음"
MAX_KEY_POINTS = 5
FALLBACK_SUMMARY_CHARS = 500
FALLBACK_KEY_POINT = "요약 생성 중 오류가 발생했습니다"

_KEY_POINTS_RE = re.compile(r"###\s*핵심\s*내용\s*\n([\s\S]*?)(?=###|$)", re.IGNORECASE)
_DIFFICULTY_RE = re.compile(r"###\s*난이도\s*\n([^\n]+)", re.IGNORECASE)
_TIME_RE = re.compile(r"###\s*예상\s*학습시간\s*\n([^\n]+)", re.IGNORECASE)
_SUMMARY_RE = re.compile(r"###\s*전체\s*요약\s*\n([\s\S]*?)(?=###|$)", re.IGNORECASE)
_TAGS_RE = re.compile(r"###\s*태그\s*\n([^\n]+)", re.IGNORECASE)


def default_summary_config() -> LLMConfig:
    return LLMConfig(
        model=Config.SUMMARY_MODEL,
        max_completion_tokens=1500,
        temperature=0.7,
    )


def build_summary_prompt(
    text: str,
    title: str | None = None,
    subject: str | None = None,
    professor: str | None = None,
    semester: str | None = None,
) -> str:
    return SUMMARIZER_PROMPT.format(
        title=title or MISSING_INFO,
        subject=subject or MISSING_INFO,
        professor=professor or MISSING_INFO,
        semester=semester or MISSING_INFO,
        text=truncate_text(text, Config.SUMMARY_MAX_CHARS),
    )


def parse_summary_response(response_text: str) -> Dict[str, Any]:
    """Split the sectioned model answer into summary fields.

    Missing sections keep their defaults; if the key points or the overall
    summary cannot be found, the raw answer is used as the summary.
    """
    summary: Dict[str, Any] = {
        "key_points": [],
        "difficulty": "중급",
        "estimated_time": "1시간",
        "summary": "",
        "tags": [],
    }

    match = _KEY_POINTS_RE.search(response_text)
    if match:
        points: List[str] = []
        for line in match.group(1).split("\n"):
            line = line.strip()
            if not line.startswith("-"):
                continue
            point = re.sub(r"^-\s*", "", line).strip()
            if point:
                points.append(point)
        summary["key_points"] = points[:MAX_KEY_POINTS]

    match = _DIFFICULTY_RE.search(response_text)
    if match:
        summary["difficulty"] = match.group(1).strip()

    match = _TIME_RE.search(response_text)
    if match:
        summary["estimated_time"] = match.group(1).strip()

    match = _SUMMARY_RE.search(response_text)
    if match:
        summary["summary"] = match.group(1).strip()

    match = _TAGS_RE.search(response_text)
    if match:
        summary["tags"] = [t.strip() for t in match.group(1).split(",") if t.strip()]

    # Fallback: use the whole response as summary
    if not summary["key_points"] or not summary["summary"]:
        logger.warning("Summary response did not follow the section format")
        summary["summary"] = response_text[:FALLBACK_SUMMARY_CHARS]
        summary["key_points"] = [FALLBACK_KEY_POINT]

    return summary


def generate_summary(
    text: str,
    title: str | None = None,
    subject: str | None = None,
    professor: str | None = None,
    semester: str | None = None,
    cfg: LLMConfig | None = None,
) -> Dict[str, Any]:

    cfg = cfg or default_summary_config()
    user_prompt = build_summary_prompt(text, title, subject, professor, semester)

    try:
        raw = call_llm(
            system_prompt=SUMMARY_SYSTEM_PROMPT,
            user_prompt=user_prompt,
            cfg=cfg,
            json_mode=False,
        )
    except Exception as e:
        logger.error("Summary generation failed: %s", e)
        raise SummaryError(f"Failed to generate summary: {e}") from e

    return parse_summary_response(raw)
