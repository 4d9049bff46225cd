"""
Shared fixtures for the study-notes tests.

No test talks to OpenAI or Semantic Scholar: LLM calls are replaced with
monkeypatched fakes that return canned model output.
"""

import json

import pytest


SAMPLE_NOTE = """운영체제 강의 노트 - 프로세스 관리

1. 프로세스의 정의
프로세스는 실행 중인 프로그램이다. 프로세스는 4개의 상태를 가진다.

2. 스레드
스레드는 경량 프로세스라고 불린다. 하나의 프로세스는 여러 스레드를 가질 수 있다.

3. 동기화
뮤텍스(Mutex)는 상호배제를 구현하는 도구이다.
세마포어(Semaphore)는 카운팅을 통해 자원 접근을 제어한다.
"""


class FakeLLM:
    """Records calls and answers with a fixed response (or raises)."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.calls = []

    def __call__(self, system_prompt, user_prompt, cfg, json_mode=False):
        self.calls.append({
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "cfg": cfg,
            "json_mode": json_mode,
        })
        if self.error is not None:
            raise self.error
        if isinstance(self.response, (dict, list)):
            return json.dumps(self.response, ensure_ascii=False)
        return self.response


def make_claim(claim_id, text="프로세스는 실행 중인 프로그램이다", priority="high", **extra):
    claim = {
        "id": claim_id,
        "text": text,
        "type": "definition",
        "category": "프로세스 관리",
        "keywords": ["프로세스"],
        "verifiable": True,
        "priority": priority,
        "context": "",
        "status": "pending",
        "confidence": None,
        "sources": [],
    }
    claim.update(extra)
    return claim


@pytest.fixture
def sample_note():
    return SAMPLE_NOTE


@pytest.fixture
def fake_llm():
    return FakeLLM


@pytest.fixture
def claim_factory():
    return make_claim
