from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import store
from ..db import get_db
from ..schemas import ProgressOut, ProgressSummary
from .auth import User, get_current_user

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("", response_model=List[ProgressOut])
async def list_progress(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return [store.progress_to_out(p) for p in store.list_progress(db, user.user_id)]


@router.get("/summary", response_model=ProgressSummary)
async def summary(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
	return store.progress_summary(db, user.user_id)
