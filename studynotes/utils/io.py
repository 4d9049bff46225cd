import os
import json
import logging
import mimetypes
from typing import Any, Dict
from pathlib import Path

from studynotes.config import Config
from studynotes.errors import ExtractionError
from studynotes.utils.ocr import extract_text_from_image
from studynotes.utils.pdf_parser import extract_text_from_pdf

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")
TEXT_EXTENSIONS = (".txt", ".md")


# Uploaded file (PDF / image) to note text
def extract_text_from_file(filename: str, data: bytes, mimetype: str | None = None) -> str:

    mimetype = mimetype or ""
    name = (filename or "").lower()

    if mimetype == "application/pdf" or name.endswith(".pdf"):
        kind, extractor = "PDF", extract_text_from_pdf
    elif mimetype.startswith("image/") or name.endswith(IMAGE_EXTENSIONS):
        kind, extractor = "image", extract_text_from_image
    else:
        raise ExtractionError(f"Unsupported file type: {mimetype or name}")

    try:
        text = extractor(data)
    except Exception as e:
        logger.error("Text extraction error (%s): %s", filename, e)
        raise ExtractionError(f"Failed to extract text: {e}") from e

    if len(text) < Config.MIN_TEXT_LENGTH:
        raise ExtractionError(f"{kind} contains no readable text or text is too short")

    return text


# Loading a note from disk (text, PDF or image)
def load_note(path: str) -> str:

    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Note file not found: {path}")

    if path.suffix.lower() in TEXT_EXTENSIONS:
        return path.read_text(encoding="utf-8").strip()

    mimetype, _ = mimetypes.guess_type(path.name)
    return extract_text_from_file(path.name, path.read_bytes(), mimetype)


# Final Results JSON
def write_json(path: str, data: Dict[str, Any]):

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)
