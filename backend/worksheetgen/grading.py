from __future__ import annotations

import re
from typing import Dict, List, Sequence

from .schemas import AnswerValue, GradedAnswer, GradingAnswer, GradingResult, Question, SubmissionResult


_SPACE_RE = re.compile(r"\s+")


def _normalize(value: str) -> str:
    return _SPACE_RE.sub(" ", value).strip().lower()


def answer_text(value: AnswerValue) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value or "")


def is_correct(question: Question, answer: AnswerValue) -> bool:
    given = _normalize(answer_text(answer))
    expected = _normalize(question.correct_answer)
    if not expected:
        # Placeholder questions have no reference answer; any attempt counts
        return bool(given)
    if given == expected:
        return True
    alternatives = [_normalize(part) for part in question.correct_answer.split(",")]
    return len(alternatives) > 1 and given in alternatives


def score_locally(questions: Sequence[Question], answers: Dict[str, AnswerValue]) -> SubmissionResult:
    graded: List[GradedAnswer] = []
    correct = 0
    for q in questions:
        ok = is_correct(q, answers.get(q.id, ""))
        correct += ok
        feedback = "Correct!" if ok else f"Incorrect. The correct answer is: {q.correct_answer}"
        graded.append(GradedAnswer(question_id=q.id, is_correct=ok, feedback=feedback))
    total = len(questions)
    return SubmissionResult(
        score=round(correct / total * 100) if total else 0,
        correct_count=correct,
        total_questions=total,
        overall_feedback=f"You answered {correct} of {total} questions correctly.",
        graded_answers=graded,
    )


def grading_request_answers(questions: Sequence[Question], answers: Dict[str, AnswerValue]) -> List[GradingAnswer]:
    return [
        GradingAnswer(
            question_id=q.id,
            question=q.question,
            user_answer=answers.get(q.id, ""),
            correct_answer=q.correct_answer,
            type=q.type,
        )
        for q in questions
    ]


def score_from_grading(questions: Sequence[Question], result: GradingResult) -> SubmissionResult:
    """Points-weighted score from an AI grading result.

    Every question counts towards the possible points; questions the model
    left out of its reply earn nothing.
    """
    by_id = {q.id: q for q in questions}
    earned = 0.0
    possible = sum(q.points for q in questions)
    correct = 0
    graded: List[GradedAnswer] = []
    for item in result.graded_answers:
        q = by_id.get(item.question_id)
        if q is None:
            continue
        if item.is_correct:
            correct += 1
            earned += q.points
        elif item.partial_credit:
            earned += q.points * item.partial_credit
        graded.append(item)
    return SubmissionResult(
        score=round(earned / possible * 100) if possible else 0,
        correct_count=correct,
        total_questions=len(questions),
        overall_feedback=result.overall_feedback,
        graded_answers=graded,
    )
