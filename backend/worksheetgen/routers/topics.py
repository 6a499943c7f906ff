from typing import List

from fastapi import APIRouter, HTTPException

from ..schemas import GRADES, Topic
from ..topics import get_topics

router = APIRouter(prefix="/topics", tags=["topics"])


@router.get("", response_model=List[str])
def list_grades():
	return GRADES


@router.get("/{grade}/{subject_type}", response_model=List[Topic])
def topics_for(grade: str, subject_type: str):
	try:
		return get_topics(grade.upper(), subject_type)
	except ValueError as e:
		raise HTTPException(status_code=404, detail=str(e))
