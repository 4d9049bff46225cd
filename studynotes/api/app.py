"""
Flask service for lecture-note summaries and fact-checking.

Endpoints:
    GET  /health
    POST /api/summarize          (multipart file upload)
    POST /api/summarize-text     (JSON text)
    POST /api/extract-claims     (Agent 1 only)
    POST /api/verify-claim       (Agent 2 + 3 for one claim)
    POST /api/fact-check         (full pipeline)
"""

import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import RequestEntityTooLarge

from studynotes.config import Config
from studynotes.errors import ExtractionError
from studynotes.evaluation.pipeline import check_claim, fact_check_note
from studynotes.models.claim_extractor import extract_claims
from studynotes.models.summarizer import generate_summary
from studynotes.utils.io import extract_text_from_file

logger = logging.getLogger(__name__)

TRUTHY = {"1", "true", "yes", "on"}


def _flag(value) -> bool:
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() in TRUTHY


def _too_short(text) -> bool:
    return not isinstance(text, str) or len(text.strip()) < Config.MIN_TEXT_LENGTH


def _summarize(text: str, fields, fact_check: bool):
    summary = generate_summary(
        text=text,
        title=fields.get("title"),
        subject=fields.get("subject"),
        professor=fields.get("professor"),
        semester=fields.get("semester"),
    )
    if fact_check:
        summary["fact_check"] = fact_check_note(text, subject=fields.get("subject"))
    return summary


def create_app() -> Flask:
    app = Flask(__name__)
    app.config["MAX_CONTENT_LENGTH"] = Config.MAX_UPLOAD_MB * 1024 * 1024
    app.json.ensure_ascii = False
    CORS(app)

    @app.errorhandler(RequestEntityTooLarge)
    def too_large(e):
        return jsonify({"error": f"File exceeds {Config.MAX_UPLOAD_MB}MB limit"}), 413

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok", "service": "ai-summary-service"})

    @app.route("/api/summarize", methods=["POST"])
    def summarize_file():
        upload = request.files.get("file")
        if upload is None or not upload.filename:
            return jsonify({"error": "No file uploaded"}), 400

        logger.info("Processing file: %s", upload.filename)

        try:
            text = extract_text_from_file(upload.filename, upload.read(), upload.mimetype)
        except ExtractionError as e:
            logger.warning("Extraction failed for %s: %s", upload.filename, e)
            return jsonify({
                "error": "Could not extract sufficient text from file",
                "details": str(e),
            }), 400

        try:
            return jsonify(_summarize(text, request.form, _flag(request.form.get("fact_check"))))
        except Exception as e:
            logger.exception("Error processing request")
            return jsonify({"error": "Failed to generate summary", "message": str(e)}), 500

    @app.route("/api/summarize-text", methods=["POST"])
    def summarize_text():
        body = request.get_json(silent=True) or {}
        text = body.get("text")

        if _too_short(text):
            return jsonify({
                "error": f"Text is required and must be at least {Config.MIN_TEXT_LENGTH} characters"
            }), 400

        try:
            return jsonify(_summarize(text, body, _flag(body.get("fact_check"))))
        except Exception as e:
            logger.exception("Error generating summary")
            return jsonify({"error": "Failed to generate summary", "message": str(e)}), 500

    @app.route("/api/extract-claims", methods=["POST"])
    def extract_claims_route():
        body = request.get_json(silent=True) or {}
        note = body.get("note_content")

        if _too_short(note):
            return jsonify({
                "error": f"note_content is required and must be at least {Config.MIN_TEXT_LENGTH} characters"
            }), 400

        try:
            return jsonify(extract_claims(note, body.get("subject")))
        except Exception as e:
            logger.exception("Error extracting claims")
            return jsonify({"error": "Failed to extract claims", "message": str(e)}), 500

    @app.route("/api/verify-claim", methods=["POST"])
    def verify_claim_route():
        body = request.get_json(silent=True) or {}
        claim = body.get("claim")

        if not isinstance(claim, dict) or not str(claim.get("text") or "").strip():
            return jsonify({"error": "claim with non-empty text is required"}), 400

        try:
            return jsonify(check_claim(claim))
        except Exception as e:
            logger.exception("Error verifying claim")
            return jsonify({"error": "Failed to verify claim", "message": str(e)}), 500

    @app.route("/api/fact-check", methods=["POST"])
    def fact_check_route():
        body = request.get_json(silent=True) or {}
        note = body.get("note_content")

        if _too_short(note):
            return jsonify({
                "error": f"note_content is required and must be at least {Config.MIN_TEXT_LENGTH} characters"
            }), 400

        try:
            result = fact_check_note(
                note,
                subject=body.get("subject"),
                check_all=_flag(body.get("check_all")),
            )
            return jsonify(result)
        except Exception as e:
            logger.exception("Error fact-checking note")
            return jsonify({"error": "Failed to fact-check note", "message": str(e)}), 500

    return app


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    app = create_app()
    logger.info("AI Summary Service running on port %d", Config.PORT)
    app.run(host="0.0.0.0", port=Config.PORT)


if __name__ == "__main__":
    main()
