import io
import logging

from PIL import Image, ImageFilter, ImageOps
import pytesseract

from studynotes.config import Config

logger = logging.getLogger(__name__)


# Grayscale, stretch contrast and sharpen before OCR
def preprocess_image(img: Image.Image) -> Image.Image:
    gray = ImageOps.grayscale(img)
    return ImageOps.autocontrast(gray).filter(ImageFilter.SHARPEN)


def extract_text_from_image(data: bytes, lang: str | None = None) -> str:
    with Image.open(io.BytesIO(data)) as img:
        processed = preprocess_image(img)

    logger.info("Running OCR on image...")
    text = pytesseract.image_to_string(processed, lang=lang or Config.OCR_LANG).strip()

    logger.info("Extracted %d characters from image via OCR", len(text))
    return text
