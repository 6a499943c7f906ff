from __future__ import annotations

import json
from typing import Dict, List

from .schemas import GenerationRequest, GradingRequest


WORKSHEET_TYPE_LABELS: Dict[str, str] = {
    "grammar": "Grammar Practice",
    "vocabulary": "Vocabulary Builder",
    "readingComprehension": "Reading Comprehension",
}

DIFFICULTY_DESCRIPTIONS: Dict[str, str] = {
    "easy": "basic understanding and recall",
    "medium": "application and analysis",
    "hard": "critical thinking and evaluation",
}

TYPE_RULES: Dict[str, str] = {
    "multiple-choice": "For multiple-choice questions, provide exactly 4 options in \"options\" with one correct answer; \"correctAnswer\" must repeat the text of that option.",
    "fill-blank": "For fill-blank questions, mark the blank in the question text with _____ and give the missing word(s) as \"correctAnswer\".",
    "short-answer": "For short-answer questions, provide a sample correct answer as \"correctAnswer\".",
    "essay": "For essay questions, put the evaluation criteria in \"correctAnswer\".",
}

_EXAMPLE_QUESTIONS: Dict[str, Dict[str, object]] = {
    "multiple-choice": {
        "type": "multiple-choice",
        "question": "Question text",
        "options": ["Option A", "Option B", "Option C", "Option D"],
        "correctAnswer": "Option A",
        "explanation": "Why this is the correct answer",
        "points": 2,
    },
    "fill-blank": {
        "type": "fill-blank",
        "question": "Question with _____ blank",
        "correctAnswer": "the correct word",
        "explanation": "Why this is the correct answer",
        "points": 2,
    },
    "short-answer": {
        "type": "short-answer",
        "question": "Question text",
        "correctAnswer": "A sample correct answer",
        "explanation": "What a good answer includes",
        "points": 5,
    },
    "essay": {
        "type": "essay",
        "question": "Essay prompt",
        "correctAnswer": "Evaluation criteria",
        "explanation": "What a strong essay does",
        "points": 10,
    },
}


def grade_label(grade: str) -> str:
    return "Kindergarten" if grade == "K" else f"Grade {grade}"


def _example_output(question_types: List[str]) -> str:
    questions = []
    for idx, qtype in enumerate(question_types, start=1):
        example = {"id": str(idx)}
        example.update(_EXAMPLE_QUESTIONS[qtype])
        questions.append(example)
    shape = {
        "title": "Worksheet title",
        "instructions": "Clear instructions for students",
        "questions": questions,
    }
    return json.dumps(shape, indent=2)


def build_prompt(request: GenerationRequest) -> str:
    question_types = request.sorted_question_types()
    topic_names = ", ".join(t.name for t in request.topics)

    rules: List[str] = [
        f"IMPORTANT: ONLY create questions of the following types: {', '.join(question_types)}. "
        "DO NOT include any other question types.",
    ]
    rules.extend(TYPE_RULES[t] for t in question_types)
    if request.include_answer_key:
        rules.append("Include the correct answer for every question so an answer key can be built.")
    if request.show_hints:
        rules.append("Include a hint or explanation for each question in \"explanation\".")
    if request.time_limit_minutes:
        rules.append(f"This worksheet should take approximately {request.time_limit_minutes} minutes to complete.")
    numbered = "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, start=1))

    return f"""
Create an educational English worksheet for {grade_label(request.grade)} students focusing on {WORKSHEET_TYPE_LABELS[request.subject_type]}.
Topics to cover: {topic_names}
Difficulty level: {request.difficulty} ({DIFFICULTY_DESCRIPTIONS[request.difficulty]})

Please generate {request.question_count} questions with the following specifications:
{numbered}

Format your response as a single JSON object with the following structure (no markdown, no commentary):
{_example_output(question_types)}
""".strip()


def build_grading_prompt(request: GradingRequest) -> str:
    answers_json = json.dumps([a.model_dump() for a in request.answers], indent=2)
    strictness = {"easy": "more lenient", "medium": "moderately strict", "hard": "very strict"}[request.difficulty]
    return f"""
Grade the following student answers for an English worksheet.
The difficulty level of this worksheet is {request.difficulty}.

Here are the questions and student answers in JSON format:
{answers_json}

Evaluate each answer and provide feedback. For multiple-choice and fill-blank questions the answer must match.
For short-answer and essay questions, evaluate content, accuracy and completeness.
For {request.difficulty} difficulty, be {strictness} in your grading.

Return ONLY a JSON object with this structure:
{{
  "overallFeedback": "General feedback about the student's performance",
  "gradedAnswers": [
    {{"questionId": "question_id", "isCorrect": true, "feedback": "Specific feedback", "partialCredit": 0.75}}
  ],
  "score": 85
}}
"partialCredit" is optional (0-1) and only meaningful for short-answer and essay questions. "score" is a percentage from 0 to 100.
""".strip()
