"""Tolerant parsing of model output into worksheets and grading results.

Models wrap JSON in prose, forget to quote keys, use single quotes and leave
trailing commas. The repairs below are small ordered string passes, each
usable on its own:

    extract_json_block -> strip_trailing_commas -> quote_keys -> quote_values

They only run when the extracted block is not already valid JSON and stop at
the first pass that yields it. Double-quoted strings are never rewritten.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .errors import ParseError
from .schemas import (
    QUESTION_TYPES,
    GeneratedWorksheet,
    GradedAnswer,
    GradingResult,
    Question,
    default_points,
)


logger = logging.getLogger(__name__)

_JSON_BLOCK_RE = re.compile(r"\{[\s\S]*\}")
# Double-quoted strings match as "skip" and are written back untouched
_DQ_STRING = r'"(?:[^"\\]|\\.)*"'
_SQ_STRING = r"'(?:[^'\\]|\\.)*'"
_KEY_RE = re.compile(
    r"(?P<pre>[{,]\s*)(?P<q>['\"]?)(?P<key>[A-Za-z0-9_]+)(?P=q)(?P<post>\s*:)"
    r"|(?P<skip>" + _DQ_STRING + "|" + _SQ_STRING + ")"
)
_VALUE_RE = re.compile(r"(?P<skip>" + _DQ_STRING + r")|(?P<pre>[:\[,]\s*)'(?P<body>(?:[^'\\]|\\.)*)'")
_TRAILING_COMMA_RE = re.compile(r"(?P<skip>" + _DQ_STRING + r")|,\s*(?P<close>[\]}])")

TYPE_ALIASES: Dict[str, str] = {
    "mcq": "multiple-choice",
    "multiple_choice": "multiple-choice",
    "multiplechoice": "multiple-choice",
    "fill-in-the-blank": "fill-blank",
    "fill_in_the_blank": "fill-blank",
    "fill_blank": "fill-blank",
    "fill-in-blank": "fill-blank",
    "short_answer": "short-answer",
    "long-answer": "short-answer",
    "long_answer": "short-answer",
}

GRADING_FAILURE_FEEDBACK = "Unable to grade worksheet. Please try again or grade manually."


# ------------------------------------------------------------
# Repair passes
# ------------------------------------------------------------
def extract_json_block(text: str) -> str:
    match = _JSON_BLOCK_RE.search(text or "")
    if not match:
        raise ParseError("No JSON object found in model output")
    return match.group(0)


def _quoted_key(match: "re.Match[str]") -> str:
    if match.group("skip"):
        return match.group("skip")
    return f'{match.group("pre")}"{match.group("key")}"{match.group("post")}'


def quote_keys(text: str) -> str:
    """Unquoted or single-quoted object keys become double-quoted."""
    return _KEY_RE.sub(_quoted_key, text)


def _double_quoted(match: "re.Match[str]") -> str:
    if match.group("skip"):
        return match.group("skip")
    body = match.group("body").replace("\\'", "'").replace('"', '\\"')
    return f'{match.group("pre")}"{body}"'


def quote_values(text: str) -> str:
    """Single-quoted string values (after a colon or inside an array) become double-quoted."""
    return _VALUE_RE.sub(_double_quoted, text)


def strip_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(lambda m: m.group("skip") or m.group("close"), text)


# Cheapest first; parsing is retried after each pass
REPAIRS: List[Callable[[str], str]] = [strip_trailing_commas, quote_keys, quote_values]


def load_json_object(raw_text: str) -> Dict[str, Any]:
    block = extract_json_block(raw_text)
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        error = e
        data = None
        repaired = block
        for repair in REPAIRS:
            repaired = repair(repaired)
            try:
                data = json.loads(repaired)
                break
            except json.JSONDecodeError as err:
                error = err
        if data is None:
            raise ParseError(f"Model output is not repairable JSON: {error}") from error
    if not isinstance(data, dict):
        raise ParseError("Model output JSON is not an object")
    return data


# ------------------------------------------------------------
# Worksheet
# ------------------------------------------------------------
def normalize_question_type(value: Any) -> str:
    qtype = str(value or "").strip().lower()
    qtype = TYPE_ALIASES.get(qtype, TYPE_ALIASES.get(qtype.replace(" ", "_"), qtype))
    if qtype not in QUESTION_TYPES:
        raise ParseError(f"Unsupported question type: {value!r}")
    return qtype


def _answer_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v).strip() for v in value)
    if value is None:
        return ""
    return str(value).strip()


def _resolve_choice(answer: str, options: List[str]) -> str:
    if answer in options:
        return answer
    # "B" or "b)" style answers point at an option by letter
    letter = answer.strip().rstrip(").").upper()
    if len(letter) == 1 and "A" <= letter <= "Z":
        idx = ord(letter) - ord("A")
        if idx < len(options):
            return options[idx]
    for option in options:
        if option.strip().lower() == answer.strip().lower():
            return option
    raise ParseError(f"Correct answer {answer!r} is not among the options")


def _points(value: Any, qtype: str) -> int:
    try:
        points = int(value)
    except (TypeError, ValueError):
        return default_points(qtype)
    return points if points > 0 else default_points(qtype)


def _build_question(raw: Any, index: int, allowed: Optional[set]) -> Question:
    if not isinstance(raw, dict):
        raise ParseError(f"Question {index} is not an object")
    text = raw.get("question")
    if not raw.get("type") or not isinstance(text, str) or not text.strip():
        raise ParseError(f"Question {index} lacks a type or question text")
    qtype = normalize_question_type(raw.get("type"))
    if allowed is not None and qtype not in allowed:
        raise ParseError(f"Question {index} has type {qtype!r} outside the requested types")

    answer = _answer_text(raw.get("correctAnswer", raw.get("correct_answer")))
    options: List[str] = []
    if qtype == "multiple-choice":
        raw_options = raw.get("options")
        if not isinstance(raw_options, list) or not raw_options:
            raise ParseError(f"Question {index} is multiple-choice without options")
        options = [str(o).strip() for o in raw_options]
        answer = _resolve_choice(answer, options)

    explanation = raw.get("explanation")
    qid = raw.get("id")
    try:
        return Question(
            id=str(qid).strip() if qid not in (None, "") else str(index),
            type=qtype,
            question=text.strip(),
            options=options,
            correct_answer=answer,
            explanation=str(explanation).strip() if explanation else None,
            points=_points(raw.get("points"), qtype),
        )
    except ValidationError as e:
        raise ParseError(f"Question {index} is invalid: {e}") from e


def build_answer_key(questions: Iterable[Question]) -> Dict[str, str]:
    return {q.id: q.correct_answer for q in questions}


def parse_worksheet(
    raw_text: str,
    subject_type: str,
    include_answer_key: bool,
    allowed_types: Optional[Iterable[str]] = None,
) -> GeneratedWorksheet:
    data = load_json_object(raw_text)

    title = data.get("title")
    instructions = data.get("instructions")
    raw_questions = data.get("questions")
    if not isinstance(title, str) or not title.strip():
        raise ParseError("Worksheet is missing a title")
    if not isinstance(instructions, str) or not instructions.strip():
        raise ParseError("Worksheet is missing instructions")
    if not isinstance(raw_questions, list) or not raw_questions:
        raise ParseError("Worksheet has no questions list")

    allowed = set(allowed_types) if allowed_types is not None else None
    questions = [_build_question(q, i, allowed) for i, q in enumerate(raw_questions, start=1)]
    if len({q.id for q in questions}) != len(questions):
        # Duplicate ids would collapse answer key entries; renumber
        questions = [q.model_copy(update={"id": str(i)}) for i, q in enumerate(questions, start=1)]

    logger.debug("Parsed %s worksheet with %d questions", subject_type, len(questions))
    return GeneratedWorksheet(
        title=title.strip(),
        instructions=instructions.strip(),
        questions=questions,
        answer_key=build_answer_key(questions) if include_answer_key else {},
    )


# ------------------------------------------------------------
# Grading
# ------------------------------------------------------------
def grading_failure() -> GradingResult:
    return GradingResult(overall_feedback=GRADING_FAILURE_FEEDBACK, graded_answers=[], score=0)


def parse_grading(raw_text: str) -> GradingResult:
    """Never raises: unusable output becomes the "unable to grade" result."""
    try:
        data = load_json_object(raw_text)
        feedback = data.get("overallFeedback")
        graded = data.get("gradedAnswers")
        score = data.get("score")
        if not feedback or not isinstance(graded, list) or isinstance(score, bool) or not isinstance(score, (int, float)):
            raise ParseError("Invalid grading data format")
        answers = []
        for item in graded:
            if not isinstance(item, dict):
                raise ParseError("Graded answer is not an object")
            partial = item.get("partialCredit")
            answers.append(
                GradedAnswer(
                    question_id=str(item.get("questionId", "")),
                    is_correct=bool(item.get("isCorrect")),
                    feedback=str(item.get("feedback") or ""),
                    partial_credit=float(partial) if isinstance(partial, (int, float)) and not isinstance(partial, bool) else None,
                )
            )
        return GradingResult(
            overall_feedback=str(feedback),
            graded_answers=answers,
            score=max(0.0, min(100.0, float(score))),
        )
    except (ParseError, ValidationError) as e:
        logger.warning("Could not parse grading response: %s", e)
        return grading_failure()
