from __future__ import annotations

from datetime import datetime
from typing import Dict, FrozenSet, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# ------------------------------------------------------------
# Enumerations
# ------------------------------------------------------------
Grade = Literal["K", "1", "2", "3", "4", "5", "6", "7", "8", "9", "10", "11", "12"]
SubjectType = Literal["grammar", "vocabulary", "readingComprehension"]
Difficulty = Literal["easy", "medium", "hard"]
QuestionType = Literal["multiple-choice", "fill-blank", "short-answer", "essay"]

GRADES: List[str] = ["K"] + [str(n) for n in range(1, 13)]
SUBJECT_TYPES: List[str] = ["grammar", "vocabulary", "readingComprehension"]
# Canonical order, used wherever the types are rendered or serialised
QUESTION_TYPES: List[str] = ["multiple-choice", "fill-blank", "short-answer", "essay"]

DEFAULT_POINTS: Dict[str, int] = {"essay": 10, "short-answer": 5}


def default_points(question_type: str) -> int:
    return DEFAULT_POINTS.get(question_type, 2)


# ------------------------------------------------------------
# Generation pipeline
# ------------------------------------------------------------
class TopicRef(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class GenerationRequest(BaseModel):
    """What the student asked for. Frozen so it can be fingerprinted safely."""

    model_config = ConfigDict(frozen=True)

    grade: Grade
    subject_type: SubjectType
    topics: List[TopicRef] = Field(min_length=1)
    difficulty: Difficulty = "medium"
    question_types: FrozenSet[QuestionType] = frozenset({"multiple-choice"})
    question_count: int = Field(default=10, ge=3, le=20)
    include_answer_key: bool = True
    time_limit_minutes: Optional[int] = Field(default=None, ge=1)
    show_hints: bool = False
    allow_retries: bool = True
    # Bypasses the cache; not part of the request identity
    force_refresh: bool = False

    @field_validator("question_types")
    @classmethod
    def _default_question_types(cls, value: FrozenSet[str]) -> FrozenSet[str]:
        # The form always sends at least one type; an empty set means "no preference"
        return value or frozenset({"multiple-choice"})

    def sorted_question_types(self) -> List[str]:
        return [t for t in QUESTION_TYPES if t in self.question_types]


class Question(BaseModel):
    id: str
    type: QuestionType
    question: str
    options: List[str] = Field(default_factory=list)
    correct_answer: str = ""
    explanation: Optional[str] = None
    points: int = Field(default=2, ge=0)

    @model_validator(mode="after")
    def _check_options(self) -> "Question":
        if self.type == "multiple-choice":
            if not self.options:
                raise ValueError("multiple-choice question needs options")
            if self.correct_answer not in self.options:
                raise ValueError("correct answer must be one of the options")
        elif self.options:
            raise ValueError(f"{self.type} question must not carry options")
        return self


class GeneratedWorksheet(BaseModel):
    title: str
    instructions: str
    questions: List[Question]
    answer_key: Dict[str, str] = Field(default_factory=dict)
    # True when the model could not be reached and placeholder content was used
    fallback: bool = False


# ------------------------------------------------------------
# Grading
# ------------------------------------------------------------
AnswerValue = Union[str, List[str]]


class GradingAnswer(BaseModel):
    question_id: str
    question: str
    user_answer: AnswerValue
    correct_answer: AnswerValue
    type: QuestionType


class GradingRequest(BaseModel):
    answers: List[GradingAnswer]
    difficulty: Difficulty = "medium"


class GradedAnswer(BaseModel):
    question_id: str
    is_correct: bool
    feedback: str = ""
    partial_credit: Optional[float] = Field(default=None, ge=0, le=1)


class GradingResult(BaseModel):
    overall_feedback: str
    graded_answers: List[GradedAnswer] = Field(default_factory=list)
    score: float = Field(default=0, ge=0, le=100)


# ------------------------------------------------------------
# Topics
# ------------------------------------------------------------
class Topic(BaseModel):
    id: str
    name: str
    description: str


# ------------------------------------------------------------
# Saved worksheets & progress
# ------------------------------------------------------------
class WorksheetSettings(BaseModel):
    question_count: int = Field(default=10, ge=1, le=50)
    time_limit_minutes: Optional[int] = None
    show_hints: bool = False
    allow_retries: bool = True
    include_answer_key: bool = True


class SaveWorksheetRequest(BaseModel):
    grade: Grade
    subject_type: SubjectType
    difficulty: Difficulty
    topic_ids: List[str] = Field(default_factory=list)
    title: str
    instructions: str
    questions: List[Question] = Field(min_length=1)
    answer_key: Dict[str, str] = Field(default_factory=dict)
    settings: WorksheetSettings = Field(default_factory=WorksheetSettings)


class ProgressOut(BaseModel):
    worksheet_id: str
    score: float
    answered_questions: int
    total_questions: int
    time_spent_seconds: int
    completed: bool
    answers: Dict[str, AnswerValue] = Field(default_factory=dict)
    last_attempt_at: datetime


class SavedWorksheetOut(BaseModel):
    id: str
    grade: str
    subject_type: str
    difficulty: str
    topic_ids: List[str]
    title: str
    instructions: str
    questions: List[Question]
    answer_key: Dict[str, str]
    settings: WorksheetSettings
    created_at: datetime
    updated_at: datetime
    progress: Optional[ProgressOut] = None


class SubmitAnswersRequest(BaseModel):
    answers: Dict[str, AnswerValue]
    time_spent_seconds: int = Field(default=0, ge=0)
    use_ai_grading: bool = False


class SubmissionResult(BaseModel):
    score: float
    correct_count: int
    total_questions: int
    overall_feedback: str
    graded_answers: List[GradedAnswer]


class ProgressSummary(BaseModel):
    worksheets_attempted: int
    worksheets_completed: int
    average_score: float
    by_subject: Dict[str, float] = Field(default_factory=dict)
