from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from .cache import WorksheetCache, fingerprint
from .errors import ParseError, RemoteError
from .parser import grading_failure, parse_grading, parse_worksheet
from .prompts import build_grading_prompt, build_prompt
from .schemas import GeneratedWorksheet, GenerationRequest, GradingRequest, GradingResult, Question


logger = logging.getLogger(__name__)

MIN_QUESTIONS, MAX_QUESTIONS = 5, 20
MIN_MINUTES, MAX_MINUTES, DEFAULT_MINUTES = 5, 60, 15

FALLBACK_INSTRUCTIONS = "Complete the following questions to the best of your ability."


class InferenceClient(Protocol):
    async def invoke(self, prompt: str) -> str: ...


def normalize_request(request: GenerationRequest) -> GenerationRequest:
    minutes = request.time_limit_minutes
    return request.model_copy(
        update={
            "question_count": min(max(MIN_QUESTIONS, request.question_count), MAX_QUESTIONS),
            "time_limit_minutes": min(max(MIN_MINUTES, minutes), MAX_MINUTES) if minutes else DEFAULT_MINUTES,
        }
    )


def fallback_worksheet(request: GenerationRequest) -> GeneratedWorksheet:
    names = [t.name for t in request.topics] or ["English"]
    count = max(1, min(len(names), request.question_count))
    questions = [
        Question(
            id=f"q{i}",
            type="short-answer",
            question=f"Write two or three sentences showing what you know about {name}.",
            correct_answer="",
            points=5,
        )
        for i, name in enumerate(names[:count], start=1)
    ]
    return GeneratedWorksheet(
        title=f"Worksheet on {', '.join(names)}",
        instructions=FALLBACK_INSTRUCTIONS,
        questions=questions,
        answer_key={},
        fallback=True,
    )


class WorksheetGenerator:
    """Cache lookup, then prompt -> invoke -> parse with retries, then fallback.

    ``generate`` never raises RemoteError or ParseError; ConfigError passes
    straight through because retrying cannot fix it.
    """

    def __init__(
        self,
        client: InferenceClient,
        cache: WorksheetCache,
        *,
        retry_limit: int = 2,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.cache = cache
        self.retry_limit = retry_limit
        self.retry_delay = retry_delay
        self._sleep = sleep

    async def generate(self, request: GenerationRequest) -> GeneratedWorksheet:
        key = fingerprint(request)
        if not request.force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("Worksheet cache hit")
                return cached

        normalized = normalize_request(request)
        allowed = normalized.sorted_question_types()
        attempts = self.retry_limit + 1
        last_error: Optional[Exception] = None
        for attempt in range(1, attempts + 1):
            try:
                raw = await self.client.invoke(build_prompt(normalized))
                worksheet = parse_worksheet(
                    raw,
                    normalized.subject_type,
                    normalized.include_answer_key,
                    allowed_types=allowed,
                )
            except (RemoteError, ParseError) as e:
                last_error = e
                if attempt < attempts:
                    delay = self.retry_delay * (2 ** (attempt - 1))
                    logger.warning(
                        "Worksheet generation attempt %d/%d failed (%s: %s); retrying in %.1fs",
                        attempt, attempts, type(e).__name__, e, delay,
                    )
                    await self._sleep(delay)
                continue
            self.cache.put(key, worksheet)
            return worksheet

        logger.warning("Worksheet generation gave up after %d attempts (%s); using fallback", attempts, last_error)
        return fallback_worksheet(request)

    async def grade(self, request: GradingRequest) -> GradingResult:
        if not request.answers:
            return grading_failure()
        try:
            raw = await self.client.invoke(build_grading_prompt(request))
        except RemoteError as e:
            logger.warning("AI grading failed: %s", e)
            return grading_failure()
        return parse_grading(raw)
