"""Tests for the worksheet and grading prompt templates."""
from worksheetgen.parser import load_json_object
from worksheetgen.prompts import build_grading_prompt, build_prompt, grade_label
from worksheetgen.schemas import GradingAnswer, GradingRequest


class TestGradeLabel:
    def test_kindergarten(self):
        assert grade_label("K") == "Kindergarten"

    def test_numbered_grade(self):
        assert grade_label("7") == "Grade 7"


class TestBuildPrompt:
    def test_renders_request_details(self, make_request):
        prompt = build_prompt(make_request(
            topics=[{"id": "nouns", "name": "Nouns"}, {"id": "verbs", "name": "Action Verbs"}],
            difficulty="hard",
        ))
        assert "Grade 5" in prompt
        assert "Grammar Practice" in prompt
        assert "Topics to cover: Nouns, Action Verbs" in prompt
        assert "hard (critical thinking and evaluation)" in prompt
        assert "generate 5 questions" in prompt

    def test_kindergarten_label(self, make_request):
        assert "Kindergarten students" in build_prompt(make_request(grade="K"))

    def test_whitelist_lists_only_selected_types(self, make_request):
        prompt = build_prompt(make_request(question_types=["multiple-choice"]))
        assert "ONLY create questions of the following types: multiple-choice." in prompt
        for other in ("fill-blank", "short-answer", "essay"):
            assert other not in prompt

    def test_whitelist_uses_canonical_order(self, make_request):
        prompt = build_prompt(make_request(question_types=["essay", "fill-blank"]))
        assert "following types: fill-blank, essay." in prompt
        assert "_____" in prompt
        assert "evaluation criteria" in prompt
        assert "multiple-choice" not in prompt

    def test_example_json_only_uses_selected_types(self, make_request):
        prompt = build_prompt(make_request(question_types=["short-answer", "multiple-choice"]))
        example = load_json_object(prompt)
        assert {q["type"] for q in example["questions"]} == {"multiple-choice", "short-answer"}
        assert set(example) == {"title", "instructions", "questions"}

    def test_optional_lines(self, make_request):
        plain = build_prompt(make_request(show_hints=False, time_limit_minutes=None, include_answer_key=False))
        assert "hint" not in plain
        assert "minutes" not in plain
        rich = build_prompt(make_request(show_hints=True, time_limit_minutes=20))
        assert "hint or explanation" in rich
        assert "approximately 20 minutes" in rich

    def test_deterministic(self, make_request):
        req = make_request(question_types=["essay", "multiple-choice", "fill-blank"])
        assert build_prompt(req) == build_prompt(req)


class TestBuildGradingPrompt:
    def test_strictness_follows_difficulty(self):
        answers = [GradingAnswer(question_id="1", question="Q", user_answer="a", correct_answer="a", type="fill-blank")]
        assert "more lenient" in build_grading_prompt(GradingRequest(answers=answers, difficulty="easy"))
        assert "very strict" in build_grading_prompt(GradingRequest(answers=answers, difficulty="hard"))

    def test_includes_answers(self):
        answers = [GradingAnswer(question_id="q9", question="Spell cat", user_answer="kat", correct_answer="cat", type="fill-blank")]
        prompt = build_grading_prompt(GradingRequest(answers=answers))
        assert '"question_id": "q9"' in prompt
        assert "kat" in prompt
