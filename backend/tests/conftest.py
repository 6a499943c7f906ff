"""Shared fixtures. Everything runs offline: the model is a stub, the clock is fake."""
import json

import pytest

from worksheetgen.schemas import GenerationRequest


class StubClient:
    """Stands in for GeminiClient. Replays outcomes in order; the last one repeats."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.prompts = []

    async def invoke(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        pass


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SleepRecorder:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def make_request():
    def _make(**overrides) -> GenerationRequest:
        data = dict(
            grade="5",
            subject_type="grammar",
            topics=[{"id": "nouns", "name": "Nouns"}],
            difficulty="easy",
            question_types=["multiple-choice"],
            question_count=5,
            include_answer_key=True,
        )
        data.update(overrides)
        return GenerationRequest(**data)
    return _make


@pytest.fixture
def mc_worksheet_json():
    def _make(n: int = 5, prose: bool = True) -> str:
        body = json.dumps({
            "title": "Nouns Practice",
            "instructions": "Choose the best answer for each question.",
            "questions": [
                {
                    "id": str(i),
                    "type": "multiple-choice",
                    "question": f"Which word in sentence {i} is a noun?",
                    "options": ["dog", "run", "blue", "quickly"],
                    "correctAnswer": "dog",
                    "explanation": "A dog is a thing.",
                }
                for i in range(1, n + 1)
            ],
        })
        if prose:
            return f"Sure! Here is your worksheet:\n```json\n{body}\n```\nGood luck!"
        return body
    return _make


@pytest.fixture
def stub_client():
    return StubClient


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()
