from dataclasses import dataclass
from typing import Any, Dict
import json
import logging
import re

from openai import OpenAI

from studynotes.config import Config

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    model: str
    max_completion_tokens: int = 512
    temperature: float | None = None  # Only sent when set
    seed: int | None = None


def call_llm(
    system_prompt: str,
    user_prompt: str,
    cfg: LLMConfig,
    json_mode: bool = False
) -> str:

    client = OpenAI(api_key=Config.OPENAI_API_KEY)

    # Build request payload
    request: Dict[str, Any] = {
        "model": cfg.model,
        "messages": [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ],
        "max_completion_tokens": cfg.max_completion_tokens,
    }

    if cfg.temperature is not None:
        request["temperature"] = cfg.temperature

    if cfg.seed is not None:
        request["seed"] = cfg.seed

    # JSON mode enabled if requested
    if json_mode:
        request["response_format"] = {"type": "json_object"}

    logger.debug("Calling %s (json_mode=%s)", cfg.model, json_mode)
    response = client.chat.completions.create(**request)

    # Return the text output
    return response.choices[0].message.content or ""


#Json parse
def parse_json_or_throw(text: str) -> Dict[str, Any]:
    try:
        return json.loads(text)
    except (TypeError, ValueError):
        # Fallback: extract JSON substring
        match = re.search(r"\{[\s\S]*\}", text or "")
        if match:
            try:
                return json.loads(match.group(0))
            except ValueError:
                pass
        raise ValueError(f"LLM did not return valid JSON.\nOutput:\n{text}")
