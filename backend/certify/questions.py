from __future__ import annotations
import logging
from typing import Dict, Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .errors import NotFoundError, ValidationError
from .models import Question
from .schemas import ClientQuestion, QuestionIn
from .settings import settings
from .taxonomy import levels_for_step


logger = logging.getLogger(__name__)


def sample_questions(db: Session, step: int, size: Optional[int] = None) -> List[ClientQuestion]:
	"""Random sample (without replacement) of questions for both levels of a step.

	Returns every matching question when fewer than `size` exist. The result
	is the client projection, so the correct option never leaves the server.
	"""
	levels = levels_for_step(step)
	limit = settings.exam_sample_size if size is None else size
	rows = (
		db.query(Question)
		.filter(Question.level.in_(levels))
		.order_by(func.random())
		.limit(limit)
		.all()
	)
	return [ClientQuestion.model_validate(row) for row in rows]


def find_by_ids(db: Session, ids: Iterable[str]) -> Dict[str, Question]:
	wanted = {str(i) for i in ids if i is not None}
	if not wanted:
		return {}
	rows = db.query(Question).filter(Question.id.in_(wanted)).all()
	return {row.id: row for row in rows}


# ---- Admin question bank ----

def list_questions(db: Session, step: int, level: str) -> List[Question]:
	return (
		db.query(Question)
		.filter(Question.step == step, Question.level == level)
		.order_by(Question.created_at.asc())
		.all()
	)


def count_questions(db: Session, step: int, level: str) -> int:
	return db.query(Question).filter(Question.step == step, Question.level == level).count()


def create_question(db: Session, data: QuestionIn) -> Question:
	limit = settings.questions_per_level_limit
	if count_questions(db, data.step, data.level) >= limit:
		raise ValidationError(f"Limit reached: max {limit} questions per step and level")
	row = Question(
		step=data.step,
		level=data.level,
		question_text=data.question_text,
		options=list(data.options),
		correct_option_index=data.correct_option_index,
	)
	db.add(row)
	db.commit()
	db.refresh(row)
	logger.info("Question %s created for step %s level %s", row.id, row.step, row.level)
	return row


def update_question(db: Session, question_id: str, data: QuestionIn) -> Question:
	row = db.get(Question, question_id)
	if row is None:
		raise NotFoundError("Question not found")
	row.step = data.step
	row.level = data.level
	row.question_text = data.question_text
	row.options = list(data.options)
	row.correct_option_index = data.correct_option_index
	db.add(row)
	db.commit()
	db.refresh(row)
	return row


def delete_question(db: Session, question_id: str) -> None:
	# Results keep their answers; a deleted question simply scores as wrong
	row = db.get(Question, question_id)
	if row is None:
		raise NotFoundError("Question not found")
	db.delete(row)
	db.commit()
	logger.info("Question %s deleted", question_id)
