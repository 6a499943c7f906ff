from __future__ import annotations

import json
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from .schemas import GeneratedWorksheet, GenerationRequest


DEFAULT_TTL_SECONDS = 5 * 60


def fingerprint(request: GenerationRequest) -> str:
    """Canonical cache key; selection order of topics and types does not matter."""
    return json.dumps(
        {
            "grade": request.grade,
            "subject_type": request.subject_type,
            "topics": sorted(t.id for t in request.topics),
            "difficulty": request.difficulty,
            "question_types": sorted(request.question_types),
            "question_count": request.question_count,
            "include_answer_key": request.include_answer_key,
            "time_limit_minutes": request.time_limit_minutes,
            "show_hints": request.show_hints,
            "allow_retries": request.allow_retries,
        },
        sort_keys=True,
        separators=(",", ":"),
    )


@dataclass
class CacheEntry:
    key: str
    value: GeneratedWorksheet
    stored_at: float


class WorksheetCache:
    """In-process worksheet cache with a read-time TTL check.

    Expired entries are not evicted, just ignored until overwritten. Values are
    copied in and out so callers cannot mutate a cached worksheet.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[GeneratedWorksheet]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.stored_at >= self.ttl_seconds:
            return None
        return entry.value.model_copy(deep=True)

    def put(self, key: str, worksheet: GeneratedWorksheet) -> None:
        self._entries[key] = CacheEntry(key=key, value=worksheet.model_copy(deep=True), stored_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
