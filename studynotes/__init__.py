# Top-level package for the lecture-note study assistant.

# This project implements:
# - PDF / image → note text extraction (PyMuPDF, Tesseract OCR)
# - AI study summaries of lecture notes
# - A three-agent fact-check pipeline (claims → evidence → verdicts)
# - Report aggregation and accuracy grading
# - A small HTTP service exposing all of the above

# Subpackages:
#     utils/         → PDF parsing, OCR, text helpers, grounding signals, IO
#     models/        → LLM client, summarizer, claim extractor, evidence, verifier
#     evaluation/    → Fact-check pipeline and report scoring
#     api/           → Flask service
#     experiments/   → Runner scripts
#     visualization/ → Report charts
