from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Boolean, Column, String, DateTime, Float, ForeignKey, Integer, JSON, Text, UniqueConstraint
from .db import Base


def _new_id() -> str:
	return uuid.uuid4().hex


class SavedWorksheet(Base):
	__tablename__ = "saved_worksheets"
	id = Column(String(32), primary_key=True, default=_new_id)
	# Subject claim of the hosted auth provider's token
	user_id = Column(String(128), nullable=False, index=True)
	title = Column(String(256), nullable=False)
	grade = Column(String(4), nullable=False)
	subject_type = Column(String(32), nullable=False)
	difficulty = Column(String(16), nullable=False)
	topic_ids = Column(JSON, nullable=False, default=list)
	instructions = Column(Text, nullable=False, default="")
	questions = Column(JSON, nullable=False, default=list)
	answer_key = Column(JSON, nullable=False, default=dict)
	settings = Column(JSON, nullable=False, default=dict)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class WorksheetProgress(Base):
	__tablename__ = "worksheet_progress"
	__table_args__ = (UniqueConstraint("user_id", "worksheet_id", name="uq_progress_user_worksheet"),)
	id = Column(String(32), primary_key=True, default=_new_id)
	user_id = Column(String(128), nullable=False, index=True)
	worksheet_id = Column(String(32), ForeignKey("saved_worksheets.id", ondelete="CASCADE"), nullable=False, index=True)
	score = Column(Float, default=0, nullable=False)
	answered_questions = Column(Integer, default=0, nullable=False)
	total_questions = Column(Integer, default=0, nullable=False)
	time_spent_seconds = Column(Integer, default=0, nullable=False)
	completed = Column(Boolean, default=False, nullable=False)
	answers = Column(JSON, nullable=False, default=dict)  # question id -> submitted answer
	last_attempt_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
