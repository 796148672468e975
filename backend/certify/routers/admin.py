from __future__ import annotations
import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from .. import questions as question_bank
from ..db import get_db
from ..errors import NotFoundError, ValidationError
from ..geo_client import GeoClient, GeoLookupError, get_geo_client
from ..models import Visit
from ..schemas import QuestionIn, QuestionOut, VisitOut
from .auth import Admin, get_current_admin


router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger(__name__)


class TrackVisitRequest(BaseModel):
	ip: Optional[str] = None


def _require_step_level(step: Optional[int], level: Optional[str]) -> str:
	if not step or not level:
		raise HTTPException(status_code=400, detail="step and level query params are required")
	return level


@router.get("/questions", response_model=list[QuestionOut])
def list_questions(
	step: Optional[int] = None,
	level: Optional[str] = None,
	admin: Admin = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	level = _require_step_level(step, level)
	return question_bank.list_questions(db, step, level)


@router.get("/questions/count")
def count_questions(
	step: Optional[int] = None,
	level: Optional[str] = None,
	admin: Admin = Depends(get_current_admin),
	db: Session = Depends(get_db),
):
	level = _require_step_level(step, level)
	return {"count": question_bank.count_questions(db, step, level)}


@router.post("/questions", response_model=QuestionOut, status_code=201)
def create_question(req: QuestionIn, admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
	try:
		return question_bank.create_question(db, req)
	except ValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))


@router.put("/questions/{question_id}", response_model=QuestionOut)
def update_question(question_id: str, req: QuestionIn, admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
	try:
		return question_bank.update_question(db, question_id, req)
	except NotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))


@router.delete("/questions/{question_id}")
def delete_question(question_id: str, admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
	try:
		question_bank.delete_question(db, question_id)
	except NotFoundError as e:
		raise HTTPException(status_code=404, detail=str(e))
	return {"message": "Deleted"}


@router.post("/track-visit")
async def track_visit(req: TrackVisitRequest, db: Session = Depends(get_db), geo: GeoClient = Depends(get_geo_client)):
	ip = (req.ip or "").strip()
	if not ip:
		raise HTTPException(status_code=400, detail="IP is required")
	try:
		location = await geo.lookup(ip)
	except GeoLookupError as e:
		logger.warning("Visit not tracked: %s", e)
		raise HTTPException(status_code=502, detail="Failed to track visit")
	db.add(Visit(ip=ip, country=location.country, city=location.city, timestamp=datetime.utcnow()))
	db.commit()
	return {"message": "Visit logged", "country": location.country, "city": location.city}


@router.get("/visits", response_model=list[VisitOut])
def list_visits(admin: Admin = Depends(get_current_admin), db: Session = Depends(get_db)):
	return db.query(Visit).order_by(Visit.timestamp.desc()).all()
