from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import ledger
from ..certificates import CertificateRenderer, get_renderer
from ..db import get_db
from ..errors import ConflictError, StorageError, ValidationError
from ..exams import submit_exam
from ..questions import sample_questions
from ..schemas import ExamSummary, ResultOut, ResultSummary, SubmitRequest, SubmitResponse


router = APIRouter(prefix="/exam", tags=["exam"])


@router.get("/questions")
def get_questions(step: int = 1, db: Session = Depends(get_db)):
	try:
		questions = sample_questions(db, step)
	except ValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return {"questions": [q.model_dump(by_alias=True) for q in questions]}


@router.post("/submit", response_model=SubmitResponse)
def submit(req: SubmitRequest, db: Session = Depends(get_db), renderer: CertificateRenderer = Depends(get_renderer)):
	try:
		outcome = submit_exam(db, req, renderer)
	except ValidationError as e:
		raise HTTPException(status_code=400, detail=str(e))
	except ConflictError as e:
		raise HTTPException(status_code=403, detail=str(e))
	except StorageError as e:
		raise HTTPException(status_code=500, detail=str(e))
	return SubmitResponse(
		saved_result=ResultOut.model_validate(outcome.result),
		certification=outcome.certification,
		percentage=outcome.percentage,
		proceed_to_next_step=outcome.proceed,
		certificate_url=outcome.certificate_url,
	)


@router.get("/latest-result")
def latest_result(
	user_id: Optional[str] = Query(default=None, alias="userId"),
	step: Optional[int] = None,
	db: Session = Depends(get_db),
):
	if not user_id or step is None:
		raise HTTPException(status_code=400, detail="userId and step required")
	try:
		row = ledger.find_latest_for_user_step(db, user_id, step)
	except StorageError as e:
		raise HTTPException(status_code=500, detail=str(e))
	result = ResultOut.model_validate(row).model_dump(by_alias=True, mode="json") if row else None
	return {"result": result}


@router.get("/user-exams/{user_id}", response_model=list[ExamSummary])
def user_exams(user_id: str, db: Session = Depends(get_db), renderer: CertificateRenderer = Depends(get_renderer)):
	try:
		rows = ledger.find_all_for_user(db, user_id)
	except StorageError as e:
		raise HTTPException(status_code=500, detail=str(e))
	return [
		ExamSummary(
			id=r.id,
			step=r.step,
			level=r.level,
			score=r.score,
			total=r.total,
			percentage=r.percentage,
			certification=r.certification,
			date=r.created_at,
			certificate_url=renderer.url_if_exists(r.id, r.certification),
		)
		for r in rows
	]


@router.get("/all-results")
def all_results(db: Session = Depends(get_db), renderer: CertificateRenderer = Depends(get_renderer)):
	try:
		rows = ledger.find_all(db)
	except StorageError as e:
		raise HTTPException(status_code=500, detail=str(e))
	results = [
		ResultSummary(
			id=r.id,
			user_id=r.user_id,
			name=r.name,
			email=r.email,
			step=r.step,
			level=r.level,
			score=r.score,
			total=r.total,
			percentage=r.percentage,
			certification=r.certification,
			date=r.created_at,
			updated_at=r.updated_at,
			certificate_url=renderer.url_if_exists(r.id, r.certification),
		)
		for r in rows
	]
	return {"results": [r.model_dump(by_alias=True, mode="json") for r in results]}
