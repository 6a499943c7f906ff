"""Smoke tests for worksheet PDF rendering."""
from worksheetgen.pdf import _sanitize_text, render_worksheet_pdf
from worksheetgen.schemas import Question


def _questions():
    return [
        Question(id="1", type="multiple-choice", question="Which is a noun?",
                 options=["dog", "run", "blue", "fast"], correct_answer="dog"),
        Question(id="2", type="fill-blank", question="I ___ to school.", correct_answer="went"),
        Question(id="3", type="essay", question="Describe your favourite place — and why.", points=10),
    ]


def test_renders_pdf_bytes():
    content = render_worksheet_pdf(
        title="Nouns & Verbs <Practice>",
        instructions="Answer every question.",
        questions=_questions(),
        grade="K",
        subject_type="grammar",
        difficulty="easy",
    )
    assert content.startswith(b"%PDF")


def test_answer_key_page_adds_content():
    plain = render_worksheet_pdf(title="T", instructions="I", questions=_questions())
    keyed = render_worksheet_pdf(include_answer_key=True, title="T", instructions="I", questions=_questions())
    assert keyed.startswith(b"%PDF")
    assert len(keyed) > len(plain)


def test_sanitize_escapes_markup_and_replaces_dashes():
    assert _sanitize_text("a — b <c> & d") == "a - b &lt;c&gt; &amp; d"
