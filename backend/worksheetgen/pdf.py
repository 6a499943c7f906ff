"""Printable worksheet PDFs (student copy, optionally followed by an answer key)."""

from __future__ import annotations

import io
from typing import Dict, List, Optional
from xml.sax.saxutils import escape as xml_escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import HRFlowable, KeepTogether, PageBreak, Paragraph, SimpleDocTemplate, Spacer

from .prompts import WORKSHEET_TYPE_LABELS, grade_label
from .schemas import Question


_PRIMARY = colors.Color(0.13, 0.27, 0.55)
_MUTED = colors.Color(0.55, 0.55, 0.55)
_RULE = colors.Color(0.82, 0.82, 0.78)

_UNICODE_REPLACEMENTS = {
    "—": "-",
    "–": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
    "→": "->",
}


def _sanitize_text(text: str) -> str:
    """Latin-1 safe, markup-escaped text for Helvetica paragraphs."""
    if not text:
        return ""
    for char, replacement in _UNICODE_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    text = text.encode("latin-1", errors="replace").decode("latin-1")
    return xml_escape(text)


class WorksheetPDF:
    def __init__(self) -> None:
        self.styles = getSampleStyleSheet()
        self.styles.add(ParagraphStyle(
            name="WorksheetTitle", fontName="Helvetica-Bold", fontSize=18, leading=22,
            alignment=TA_CENTER, textColor=_PRIMARY, spaceAfter=4,
        ))
        self.styles.add(ParagraphStyle(
            name="WorksheetSubtitle", fontName="Helvetica", fontSize=10,
            alignment=TA_CENTER, textColor=_MUTED, spaceAfter=12,
        ))
        self.styles.add(ParagraphStyle(
            name="QuestionText", fontName="Helvetica", fontSize=11, leading=15, spaceBefore=10, spaceAfter=4,
        ))
        self.styles.add(ParagraphStyle(
            name="OptionText", fontName="Helvetica", fontSize=10.5, leading=14, leftIndent=18,
        ))
        self.styles.add(ParagraphStyle(
            name="AnswerText", fontName="Helvetica", fontSize=10, leading=14, spaceAfter=4,
        ))

    def render(
        self,
        *,
        title: str,
        instructions: str,
        questions: List[Question],
        grade: Optional[str] = None,
        subject_type: Optional[str] = None,
        difficulty: Optional[str] = None,
        answer_key: Optional[Dict[str, str]] = None,
    ) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer, pagesize=A4,
            rightMargin=2.0 * cm, leftMargin=2.0 * cm, topMargin=2.0 * cm, bottomMargin=2.0 * cm,
            title=title,
        )
        story: list = [Paragraph(_sanitize_text(title), self.styles["WorksheetTitle"])]
        subtitle = [
            grade_label(grade) if grade else None,
            WORKSHEET_TYPE_LABELS.get(subject_type or ""),
            difficulty.capitalize() if difficulty else None,
        ]
        subtitle_text = "  |  ".join(s for s in subtitle if s)
        if subtitle_text:
            story.append(Paragraph(_sanitize_text(subtitle_text), self.styles["WorksheetSubtitle"]))
        story.append(Paragraph("Name: ______________________    Date: ____________", self.styles["AnswerText"]))
        story.append(HRFlowable(width="100%", thickness=0.5, color=_PRIMARY, spaceBefore=4, spaceAfter=8))
        story.append(Paragraph(f"<i>{_sanitize_text(instructions)}</i>", self.styles["AnswerText"]))

        for number, question in enumerate(questions, start=1):
            story.append(KeepTogether(self._question(question, number)))

        if answer_key:
            story.append(PageBreak())
            story.append(Paragraph(f"{_sanitize_text(title)} - Answer Key", self.styles["WorksheetTitle"]))
            story.append(HRFlowable(width="100%", thickness=0.5, color=_PRIMARY, spaceBefore=2, spaceAfter=10))
            for number, question in enumerate(questions, start=1):
                answer = answer_key.get(question.id)
                if answer is None:
                    continue
                story.append(Paragraph(f"<b>Q{number}:</b> {_sanitize_text(answer)}", self.styles["AnswerText"]))

        doc.build(story)
        return buffer.getvalue()

    def _question(self, question: Question, number: int) -> list:
        elements: list = [Paragraph(
            f"<b>{number}.</b>  {_sanitize_text(question.question)}"
            f"  <font size='8' color='#888888'>({question.points} pts)</font>",
            self.styles["QuestionText"],
        )]
        if question.type == "multiple-choice":
            for j, option in enumerate(question.options):
                elements.append(Paragraph(f"{chr(65 + j)})  {_sanitize_text(option)}", self.styles["OptionText"]))
        elif question.type == "fill-blank":
            elements.append(Paragraph("Answer: ________________________________", self.styles["OptionText"]))
        else:
            lines = 8 if question.type == "essay" else 3
            for _ in range(lines):
                elements.append(HRFlowable(
                    width="90%", thickness=0.3, color=_RULE, spaceBefore=12, spaceAfter=0, hAlign="LEFT",
                ))
        elements.append(Spacer(1, 4))
        return elements


def render_worksheet_pdf(include_answer_key: bool = False, **worksheet) -> bytes:
    answer_key = worksheet.pop("answer_key", None) or {}
    if include_answer_key and not answer_key:
        answer_key = {q.id: q.correct_answer for q in worksheet.get("questions", [])}
    return WorksheetPDF().render(answer_key=answer_key if include_answer_key else None, **worksheet)
