from __future__ import annotations
from collections import defaultdict
from datetime import datetime
from typing import Dict, List, Optional
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import SavedWorksheet, WorksheetProgress
from .schemas import (
	AnswerValue,
	ProgressOut,
	ProgressSummary,
	Question,
	SavedWorksheetOut,
	SaveWorksheetRequest,
	WorksheetSettings,
)


def save_worksheet(db: Session, user_id: str, req: SaveWorksheetRequest) -> SavedWorksheet:
	row = SavedWorksheet(
		user_id=user_id,
		title=req.title,
		grade=req.grade,
		subject_type=req.subject_type,
		difficulty=req.difficulty,
		topic_ids=list(req.topic_ids),
		instructions=req.instructions,
		questions=[q.model_dump() for q in req.questions],
		answer_key=dict(req.answer_key),
		settings=req.settings.model_dump(),
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	return row


def get_worksheet(db: Session, worksheet_id: str, user_id: str) -> Optional[SavedWorksheet]:
	# Only the owner may see a worksheet
	return (
		db.query(SavedWorksheet)
		.filter(SavedWorksheet.id == worksheet_id, SavedWorksheet.user_id == user_id)
		.first()
	)


def list_worksheets(
	db: Session,
	user_id: str,
	*,
	grade: Optional[str] = None,
	subject_type: Optional[str] = None,
	difficulty: Optional[str] = None,
	topic: Optional[str] = None,
	completed: Optional[bool] = None,
) -> List[SavedWorksheet]:
	query = db.query(SavedWorksheet).filter(SavedWorksheet.user_id == user_id)
	if grade:
		query = query.filter(SavedWorksheet.grade == grade)
	if subject_type:
		query = query.filter(SavedWorksheet.subject_type == subject_type)
	if difficulty:
		query = query.filter(SavedWorksheet.difficulty == difficulty)
	rows = query.order_by(SavedWorksheet.created_at.desc()).all()
	if topic:
		rows = [r for r in rows if topic in (r.topic_ids or [])]
	if completed is not None:
		done = {p.worksheet_id for p in list_progress(db, user_id) if p.completed}
		rows = [r for r in rows if (r.id in done) == completed]
	return rows


def delete_worksheet(db: Session, worksheet_id: str, user_id: str) -> bool:
	row = get_worksheet(db, worksheet_id, user_id)
	if row is None:
		return False
	# Cleared explicitly for connections without FK enforcement
	db.execute(delete(WorksheetProgress).where(WorksheetProgress.worksheet_id == worksheet_id))
	db.delete(row)
	db.commit()
	return True


def get_progress(db: Session, user_id: str, worksheet_id: str) -> Optional[WorksheetProgress]:
	return (
		db.query(WorksheetProgress)
		.filter(WorksheetProgress.user_id == user_id, WorksheetProgress.worksheet_id == worksheet_id)
		.first()
	)


def list_progress(db: Session, user_id: str) -> List[WorksheetProgress]:
	return (
		db.query(WorksheetProgress)
		.filter(WorksheetProgress.user_id == user_id)
		.order_by(WorksheetProgress.last_attempt_at.desc())
		.all()
	)


def record_progress(
	db: Session,
	user_id: str,
	worksheet: SavedWorksheet,
	*,
	score: float,
	answers: Dict[str, AnswerValue],
	time_spent_seconds: int,
) -> WorksheetProgress:
	"""Upsert the single progress row for (user, worksheet); the latest attempt wins."""
	total = len(worksheet.questions or [])
	answered = sum(1 for v in answers.values() if (v if isinstance(v, list) else str(v).strip()))
	row = get_progress(db, user_id, worksheet.id)
	if row is None:
		row = WorksheetProgress(user_id=user_id, worksheet_id=worksheet.id)
	row.score = float(score)
	row.answers = dict(answers)
	row.answered_questions = answered
	row.total_questions = total
	row.time_spent_seconds = int(time_spent_seconds)
	row.completed = True
	row.last_attempt_at = datetime.utcnow()
	db.add(row)
	db.commit()
	db.refresh(row)
	return row


def progress_summary(db: Session, user_id: str) -> ProgressSummary:
	rows = list_progress(db, user_id)
	if not rows:
		return ProgressSummary(worksheets_attempted=0, worksheets_completed=0, average_score=0.0)
	subjects = {
		w.id: w.subject_type
		for w in db.query(SavedWorksheet).filter(SavedWorksheet.user_id == user_id).all()
	}
	per_subject: Dict[str, List[float]] = defaultdict(list)
	for p in rows:
		subject = subjects.get(p.worksheet_id)
		if subject:
			per_subject[subject].append(p.score)
	return ProgressSummary(
		worksheets_attempted=len(rows),
		worksheets_completed=sum(1 for p in rows if p.completed),
		average_score=round(sum(p.score for p in rows) / len(rows), 1),
		by_subject={k: round(sum(v) / len(v), 1) for k, v in per_subject.items()},
	)


def worksheet_questions(row: SavedWorksheet) -> List[Question]:
	return [Question.model_validate(q) for q in (row.questions or [])]


def progress_to_out(row: WorksheetProgress) -> ProgressOut:
	return ProgressOut(
		worksheet_id=row.worksheet_id,
		score=row.score,
		answered_questions=row.answered_questions,
		total_questions=row.total_questions,
		time_spent_seconds=row.time_spent_seconds,
		completed=row.completed,
		answers=row.answers or {},
		last_attempt_at=row.last_attempt_at,
	)


def worksheet_to_out(row: SavedWorksheet, progress: Optional[WorksheetProgress] = None) -> SavedWorksheetOut:
	return SavedWorksheetOut(
		id=row.id,
		grade=row.grade,
		subject_type=row.subject_type,
		difficulty=row.difficulty,
		topic_ids=list(row.topic_ids or []),
		title=row.title,
		instructions=row.instructions,
		questions=worksheet_questions(row),
		answer_key=dict(row.answer_key or {}),
		settings=WorksheetSettings.model_validate(row.settings or {}),
		created_at=row.created_at,
		updated_at=row.updated_at,
		progress=progress_to_out(progress) if progress is not None else None,
	)
