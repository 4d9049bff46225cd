"""
Agent 2: evidence retriever.

Each claim is searched in three places at once (an LLM web check, the
Semantic Scholar paper index, and an LLM lookup of Khan Academy / MIT OCW
material). A failing source simply contributes no evidence.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, List
import logging

import requests

from studynotes.config import Config
from studynotes.models.llm_client import call_llm, parse_json_or_throw, LLMConfig

logger = logging.getLogger(__name__)


WEB_SEARCH_SYSTEM_PROMPT = (
    "You are a fact-checking assistant. Search the web for reliable sources to verify or refute "
    "the given claim. Focus on authoritative sources like educational institutions, official "
    "documentation, and reputable tech sites."
)

WEB_SEARCH_PROMPT = """Verify this claim and provide sources: "{claim}"
Related keywords: {keywords}

Return ONLY valid JSON:
{{
  "verdict": "confirmed|refuted|partially_correct|unclear",
  "explanation": "brief explanation",
  "sources": [
    {{
      "title": "source title",
      "url": "source url",
      "excerpt": "relevant excerpt",
      "reliability": "high|medium|low"
    }}
  ]
}}"""

EDUCATION_SYSTEM_PROMPT = "You find educational material that explains or verifies academic claims."

EDUCATION_SEARCH_PROMPT = """Search Khan Academy and MIT OpenCourseWare for information about: "{claim}"

Find educational content that verifies or explains this concept. Return ONLY valid JSON:
{{
  "sources": [
    {{
      "platform": "Khan Academy|MIT OCW",
      "title": "lesson/course title",
      "url": "url",
      "excerpt": "relevant excerpt",
      "topic": "topic covered"
    }}
  ]
}}"""

SCHOLAR_FIELDS = "title,abstract,url,year,citationCount,authors"
SCHOLAR_PAPER_URL = "https://www.semanticscholar.org/paper/{paper_id}"
EXCERPT_CHARS = 300


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def web_search_config() -> LLMConfig:
    return LLMConfig(model=Config.SEARCH_MODEL, max_completion_tokens=1500, temperature=0.3)


def education_search_config() -> LLMConfig:
    return LLMConfig(model=Config.SEARCH_MODEL, max_completion_tokens=1000, temperature=0.3)


def citation_reliability(citations: int | None) -> str:
    citations = citations or 0
    if citations > 50:
        return "high"
    if citations > 10:
        return "medium"
    return "low"


def search_web(claim_text: str, keywords: List[str] | None = None) -> List[Dict[str, Any]]:
    try:
        raw = call_llm(
            system_prompt=WEB_SEARCH_SYSTEM_PROMPT,
            user_prompt=WEB_SEARCH_PROMPT.format(
                claim=claim_text,
                keywords=", ".join(keywords or []) or "-",
            ),
            cfg=web_search_config(),
            json_mode=True,
        )
        result = parse_json_or_throw(raw)

        return [
            {
                "type": "web",
                "title": source.get("title"),
                "url": source.get("url"),
                "excerpt": source.get("excerpt"),
                "verdict": result.get("verdict"),
                "reliability": source.get("reliability"),
                "retrieved_at": _now(),
            }
            for source in result.get("sources") or []
        ]
    except Exception as e:
        logger.error("Web search error: %s", e)
        return []


def _paper_to_source(paper: Dict[str, Any]) -> Dict[str, Any]:
    abstract = paper.get("abstract")
    authors = [a.get("name") for a in (paper.get("authors") or [])[:3] if a.get("name")]
    citations = paper.get("citationCount")

    return {
        "type": "academic",
        "title": paper.get("title"),
        "url": paper.get("url") or SCHOLAR_PAPER_URL.format(paper_id=paper.get("paperId")),
        "excerpt": abstract[:EXCERPT_CHARS] + "..." if abstract else "",
        "year": paper.get("year"),
        "citations": citations,
        "authors": ", ".join(authors) or "Unknown",
        "reliability": citation_reliability(citations),
        "retrieved_at": _now(),
    }


def search_semantic_scholar(claim_text: str, category: str | None = None) -> List[Dict[str, Any]]:
    params = {
        "query": claim_text,
        "limit": Config.SEMANTIC_SCHOLAR_LIMIT,
        "fields": SCHOLAR_FIELDS,
    }

    try:
        response = requests.get(
            Config.SEMANTIC_SCHOLAR_URL,
            params=params,
            headers={"Accept": "application/json"},
            timeout=Config.SEMANTIC_SCHOLAR_TIMEOUT,
        )
        response.raise_for_status()
        data = response.json()

        if not data or not data.get("data"):
            return []

        return [_paper_to_source(paper) for paper in data["data"]]
    except Exception as e:
        logger.error("Semantic Scholar search error (%s): %s", category, e)
        return []


def search_educational_resources(claim_text: str, keywords: List[str] | None = None) -> List[Dict[str, Any]]:
    try:
        raw = call_llm(
            system_prompt=EDUCATION_SYSTEM_PROMPT,
            user_prompt=EDUCATION_SEARCH_PROMPT.format(claim=claim_text),
            cfg=education_search_config(),
            json_mode=True,
        )
        result = parse_json_or_throw(raw)

        return [
            {
                "type": "educational",
                "platform": source.get("platform"),
                "title": source.get("title"),
                "url": source.get("url"),
                "excerpt": source.get("excerpt"),
                "reliability": "high",  # Khan Academy / MIT OCW
                "retrieved_at": _now(),
            }
            for source in result.get("sources") or []
        ]
    except Exception as e:
        logger.error("Educational resources search error: %s", e)
        return []


def retrieve_evidence(claim: Dict[str, Any]) -> Dict[str, Any]:

    evidence: Dict[str, Any] = {
        "claim_id": claim.get("id"),
        "claim_text": claim.get("text"),
        "sources": [],
    }

    text = claim.get("text") or ""
    keywords = claim.get("keywords") or []

    with ThreadPoolExecutor(max_workers=3) as executor:
        futures = [
            executor.submit(search_web, text, keywords),
            executor.submit(search_semantic_scholar, text, claim.get("category")),
            executor.submit(search_educational_resources, text, keywords),
        ]

        # Keep web → academic → educational order
        for future in futures:
            try:
                evidence["sources"].extend(future.result())
            except Exception as e:
                logger.error("Evidence retrieval error for claim %s: %s", claim.get("id"), e)

    logger.info("Claim %s: %d sources retrieved", claim.get("id"), len(evidence["sources"]))
    return evidence
