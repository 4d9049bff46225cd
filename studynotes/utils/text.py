from typing import List
import re


# Cut text to a prompt budget, marking the cut
def truncate_text(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[:max_chars] + "..."
    return text


# Strip whitespace and drop empty lines
def clean_lines(lines: List[str]) -> List[str]:

    cleaned = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        cleaned.append(line)
    return cleaned


# Sentence splitting (punctuation or line breaks)
def sentence_split(text: str) -> List[str]:
    parts = re.split(r"(?<=[.!?。])\s+|\n+", text)
    return [s.strip() for s in parts if s and s.strip()]
