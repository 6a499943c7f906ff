from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import store
from ..db import get_db
from ..errors import ConfigError
from ..generator import WorksheetGenerator
from ..grading import grading_request_answers, score_from_grading, score_locally
from ..pdf import render_worksheet_pdf
from ..schemas import (
    Difficulty,
    GeneratedWorksheet,
    GenerationRequest,
    Grade,
    GradingRequest,
    GradingResult,
    SavedWorksheetOut,
    SaveWorksheetRequest,
    SubjectType,
    SubmissionResult,
    SubmitAnswersRequest,
)
from ..topics import resolve_topics
from .auth import User, get_current_user


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/worksheets", tags=["worksheets"])


def get_generator(request: Request) -> WorksheetGenerator:
    return request.app.state.generator


class ExportPdfRequest(BaseModel):
    worksheet: GeneratedWorksheet
    grade: Optional[Grade] = None
    subject_type: Optional[SubjectType] = None
    difficulty: Optional[Difficulty] = None
    include_answer_key: bool = False


def _check_topics(grade: str, subject_type: str, topic_ids: List[str]) -> None:
    try:
        resolve_topics(grade, subject_type, topic_ids)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


def _pdf_response(content: bytes, title: str) -> Response:
    filename = "".join(c if c.isalnum() else "_" for c in title).strip("_")[:60] or "worksheet"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}.pdf"'},
    )


@router.post("/generate", response_model=GeneratedWorksheet)
async def generate(
    req: GenerationRequest,
    user: User = Depends(get_current_user),
    generator: WorksheetGenerator = Depends(get_generator),
):
    _check_topics(req.grade, req.subject_type, [t.id for t in req.topics])
    try:
        return await generator.generate(req)
    except ConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/grade", response_model=GradingResult)
async def grade(
    req: GradingRequest,
    user: User = Depends(get_current_user),
    generator: WorksheetGenerator = Depends(get_generator),
):
    try:
        return await generator.grade(req)
    except ConfigError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("/export/pdf")
async def export_pdf(req: ExportPdfRequest, user: User = Depends(get_current_user)):
    ws = req.worksheet
    content = render_worksheet_pdf(
        include_answer_key=req.include_answer_key,
        title=ws.title,
        instructions=ws.instructions,
        questions=ws.questions,
        answer_key=ws.answer_key,
        grade=req.grade,
        subject_type=req.subject_type,
        difficulty=req.difficulty,
    )
    return _pdf_response(content, ws.title)


@router.post("", response_model=SavedWorksheetOut, status_code=201)
async def save(req: SaveWorksheetRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    _check_topics(req.grade, req.subject_type, list(req.topic_ids))
    row = store.save_worksheet(db, user.user_id, req)
    return store.worksheet_to_out(row)


@router.get("", response_model=List[SavedWorksheetOut])
async def list_saved(
    grade: Optional[Grade] = None,
    subject_type: Optional[SubjectType] = None,
    difficulty: Optional[Difficulty] = None,
    topic: Optional[str] = None,
    completed: Optional[bool] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    rows = store.list_worksheets(
        db, user.user_id,
        grade=grade, subject_type=subject_type, difficulty=difficulty, topic=topic, completed=completed,
    )
    progress = {p.worksheet_id: p for p in store.list_progress(db, user.user_id)}
    return [store.worksheet_to_out(r, progress.get(r.id)) for r in rows]


def _owned_or_404(db: Session, worksheet_id: str, user: User):
    row = store.get_worksheet(db, worksheet_id, user.user_id)
    if row is None:
        raise HTTPException(status_code=404, detail="Worksheet not found")
    return row


@router.get("/{worksheet_id}", response_model=SavedWorksheetOut)
async def get_saved(worksheet_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    row = _owned_or_404(db, worksheet_id, user)
    return store.worksheet_to_out(row, store.get_progress(db, user.user_id, worksheet_id))


@router.delete("/{worksheet_id}")
async def delete_saved(worksheet_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    if not store.delete_worksheet(db, worksheet_id, user.user_id):
        raise HTTPException(status_code=404, detail="Worksheet not found")
    return {"ok": True}


@router.get("/{worksheet_id}/pdf")
async def saved_pdf(
    worksheet_id: str,
    answer_key: bool = Query(default=False),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    row = _owned_or_404(db, worksheet_id, user)
    content = render_worksheet_pdf(
        include_answer_key=answer_key,
        title=row.title,
        instructions=row.instructions,
        questions=store.worksheet_questions(row),
        answer_key=dict(row.answer_key or {}),
        grade=row.grade,
        subject_type=row.subject_type,
        difficulty=row.difficulty,
    )
    return _pdf_response(content, row.title)


@router.post("/{worksheet_id}/submit", response_model=SubmissionResult)
async def submit(
    worksheet_id: str,
    req: SubmitAnswersRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: WorksheetGenerator = Depends(get_generator),
):
    row = _owned_or_404(db, worksheet_id, user)
    questions = store.worksheet_questions(row)
    result: Optional[SubmissionResult] = None
    if req.use_ai_grading:
        grading_req = GradingRequest(answers=grading_request_answers(questions, req.answers), difficulty=row.difficulty)
        try:
            graded = await generator.grade(grading_req)
        except ConfigError as e:
            logger.warning("AI grading unavailable, scoring locally: %s", e)
            graded = None
        if graded is not None and graded.graded_answers:
            result = score_from_grading(questions, graded)
    if result is None:
        result = score_locally(questions, req.answers)
    store.record_progress(
        db, user.user_id, row,
        score=result.score, answers=req.answers, time_spent_seconds=req.time_spent_seconds,
    )
    return result
