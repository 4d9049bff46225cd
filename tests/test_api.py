"""Tests for the Flask service routes (agents are stubbed)."""

import io

import pytest

from studynotes.api import app as api
from studynotes.errors import ExtractionError
from studynotes.evaluation import pipeline

NOTE = "프로세스는 실행 중인 프로그램이다. " * 5

SUMMARY = {
    "key_points": ["프로세스"],
    "difficulty": "중급",
    "estimated_time": "1시간",
    "summary": "요약",
    "tags": ["OS"],
}


@pytest.fixture
def client():
    flask_app = api.create_app()
    flask_app.config["TESTING"] = True
    return flask_app.test_client()


@pytest.fixture
def stub_summary(monkeypatch):
    calls = []

    def fake_summary(text, title=None, subject=None, professor=None, semester=None):
        calls.append({"text": text, "title": title, "subject": subject})
        return dict(SUMMARY)

    monkeypatch.setattr(api, "generate_summary", fake_summary)
    return calls


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "service": "ai-summary-service"}


# ============================================================================
# Summaries
# ============================================================================


def test_summarize_text(client, stub_summary):
    resp = client.post("/api/summarize-text", json={"text": NOTE, "title": "OS 1강", "subject": "운영체제"})

    assert resp.status_code == 200
    assert resp.get_json() == SUMMARY
    assert stub_summary[0]["title"] == "OS 1강"
    assert stub_summary[0]["subject"] == "운영체제"


def test_summarize_text_rejects_short_text(client, stub_summary):
    resp = client.post("/api/summarize-text", json={"text": "   too short   "})

    assert resp.status_code == 400
    assert "at least 50 characters" in resp.get_json()["error"]
    assert stub_summary == []


def test_summarize_text_with_fact_check(client, stub_summary, monkeypatch):
    monkeypatch.setattr(api, "fact_check_note", lambda text, subject=None: {"report": {"ok": True}})

    resp = client.post("/api/summarize-text", json={"text": NOTE, "fact_check": True})

    assert resp.get_json()["fact_check"] == {"report": {"ok": True}}


def test_summarize_text_failure_is_500(client, monkeypatch):
    def broken(*args, **kwargs):
        raise RuntimeError("Failed to generate summary: quota")

    monkeypatch.setattr(api, "generate_summary", broken)

    resp = client.post("/api/summarize-text", json={"text": NOTE})

    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Failed to generate summary", "message": "Failed to generate summary: quota"}


def test_summarize_file(client, stub_summary, monkeypatch):
    seen = {}

    def fake_extract(filename, data, mimetype=None):
        seen.update(filename=filename, data=data)
        return NOTE

    monkeypatch.setattr(api, "extract_text_from_file", fake_extract)

    resp = client.post(
        "/api/summarize",
        data={"file": (io.BytesIO(b"%PDF-1.4"), "lecture.pdf"), "subject": "운영체제"},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 200
    assert seen == {"filename": "lecture.pdf", "data": b"%PDF-1.4"}
    assert stub_summary[0]["subject"] == "운영체제"


def test_summarize_file_requires_file(client):
    resp = client.post("/api/summarize", data={"title": "no file"}, content_type="multipart/form-data")

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "No file uploaded"


def test_summarize_file_unreadable(client, monkeypatch):
    def unreadable(filename, data, mimetype=None):
        raise ExtractionError("PDF contains no readable text or text is too short")

    monkeypatch.setattr(api, "extract_text_from_file", unreadable)

    resp = client.post(
        "/api/summarize",
        data={"file": (io.BytesIO(b"x"), "scan.pdf")},
        content_type="multipart/form-data",
    )

    body = resp.get_json()
    assert resp.status_code == 400
    assert body["error"] == "Could not extract sufficient text from file"
    assert "too short" in body["details"]


def test_upload_too_large(monkeypatch):
    flask_app = api.create_app()
    flask_app.config["MAX_CONTENT_LENGTH"] = 16
    client = flask_app.test_client()

    resp = client.post(
        "/api/summarize",
        data={"file": (io.BytesIO(b"x" * 1024), "big.pdf")},
        content_type="multipart/form-data",
    )

    assert resp.status_code == 413


# ============================================================================
# Fact-check routes
# ============================================================================


def test_extract_claims_route(client, monkeypatch):
    monkeypatch.setattr(api, "extract_claims", lambda note, subject=None: {"claims": [], "metadata": {"subject": subject}})

    resp = client.post("/api/extract-claims", json={"note_content": NOTE, "subject": "운영체제"})

    assert resp.status_code == 200
    assert resp.get_json()["metadata"]["subject"] == "운영체제"


def test_extract_claims_requires_note(client):
    resp = client.post("/api/extract-claims", json={"subject": "운영체제"})
    assert resp.status_code == 400


def test_verify_claim_route(client, monkeypatch):
    monkeypatch.setattr(api, "check_claim", lambda claim: {"evidence": {"sources": []}, "verification": {"verdict": "correct"}})

    resp = client.post("/api/verify-claim", json={"claim": {"id": 1, "text": "프로세스는 4개의 상태를 가진다"}})

    assert resp.status_code == 200
    assert resp.get_json()["verification"]["verdict"] == "correct"


@pytest.mark.parametrize("body", [{}, {"claim": "text"}, {"claim": {"id": 1, "text": "  "}}])
def test_verify_claim_requires_text(client, body):
    assert client.post("/api/verify-claim", json=body).status_code == 400


def test_fact_check_route_passes_flags(client, monkeypatch):
    seen = {}

    def fake_pipeline(note, subject=None, check_all=False):
        seen.update(subject=subject, check_all=check_all)
        return {"claims": [], "report": {}, "metadata": {}}

    monkeypatch.setattr(api, "fact_check_note", fake_pipeline)

    resp = client.post("/api/fact-check", json={"note_content": NOTE, "subject": "OS", "check_all": True})

    assert resp.status_code == 200
    assert seen == {"subject": "OS", "check_all": True}


def test_fact_check_route_failure(client, monkeypatch):
    def broken(note, subject=None, check_all=False):
        raise RuntimeError("Failed to fact-check note: boom")

    monkeypatch.setattr(api, "fact_check_note", broken)

    resp = client.post("/api/fact-check", json={"note_content": NOTE})

    assert resp.status_code == 500
    assert resp.get_json()["error"] == "Failed to fact-check note"


# ============================================================================
# Real pipeline output through the routes
# ============================================================================


@pytest.fixture
def live_pipeline(monkeypatch):
    """Runs the real fact_check_note with the agents answering instantly."""
    claims = [
        {"id": None, "text": "프로세스는 실행 중인 프로그램이다", "priority": "high", "keywords": []},
        {"id": 2, "text": "zzzz qqqq xxxx", "priority": "medium", "keywords": []},
    ]
    extracted = {
        "claims": claims,
        "metadata": {"total_claims": 2, "claim_types": {}, "extracted_at": "2024-01-01T00:00:00+00:00", "original_length": len(NOTE)},
    }

    def fake_verify(claim, evidence):
        return {"claim_id": claim["id"], "verdict": "correct", "confidence": 0.9, "explanation": "ok", "correction": None, "severity": "info"}

    monkeypatch.setattr(pipeline, "extract_claims", lambda note, subject=None: extracted)
    monkeypatch.setattr(pipeline, "retrieve_evidence", lambda claim: {"claim_id": claim["id"], "sources": []})
    monkeypatch.setattr(pipeline, "verify_claim", fake_verify)
    monkeypatch.setattr(pipeline.time, "sleep", lambda seconds: None)


def test_fact_check_route_serializes_mixed_claim_ids(client, live_pipeline):
    resp = client.post("/api/fact-check", json={"note_content": NOTE})

    assert resp.status_code == 200
    body = resp.get_json()
    assert [c["id"] for c in body["claims"]] == [None, 2]
    assert body["report"]["summary"]["total_checked"] == 2

    grounding = body["metadata"]["grounding"]
    assert [s["id"] for s in grounding["similarities"]] == [None, 2]
    assert grounding["ungrounded_ids"] == [2]


def test_summarize_text_attaches_real_fact_check(client, stub_summary, live_pipeline):
    resp = client.post("/api/summarize-text", json={"text": NOTE, "fact_check": True})

    assert resp.status_code == 200
    assert resp.get_json()["fact_check"]["metadata"]["grounding"]["grounded_ratio"] == 0.5
