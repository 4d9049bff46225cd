import fitz  # PyMuPDF
from typing import Any, Dict, List
import logging

from studynotes.utils.text import clean_lines

logger = logging.getLogger(__name__)


# Per-page text with empty lines removed
def extract_pages_from_pdf(data: bytes) -> List[Dict[str, Any]]:

    pages = []
    with fitz.open(stream=data, filetype="pdf") as doc:
        for page_idx, page in enumerate(doc):
            raw_text = page.get_text("text")
            lines = clean_lines(raw_text.split("\n"))

            pages.append({
                "page_number": page_idx + 1,
                "text": "\n".join(lines),
            })

    return pages


# Main PDF to text extraction
def extract_text_from_pdf(data: bytes) -> str:

    pages = extract_pages_from_pdf(data)
    text = "\n\n".join(p["text"] for p in pages if p["text"]).strip()

    logger.info("Extracted %d characters from %d PDF pages", len(text), len(pages))
    return text
