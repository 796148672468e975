from __future__ import annotations
from typing import Mapping, NamedTuple, Sequence

from sqlalchemy.orm import Session

from .models import Question
from .questions import find_by_ids
from .schemas import AnswerIn


class Score(NamedTuple):
	score: int
	total: int
	percentage: float


def score_answers(answers: Sequence[AnswerIn], questions: Mapping[str, Question]) -> Score:
	"""Score answers against resolved questions.

	`total` counts every submitted answer, including ones whose question no
	longer exists; those simply earn nothing.
	"""
	score = 0
	for answer in answers:
		question = questions.get(answer.question_id)
		if question is None:
			continue
		if answer.selected_index == question.correct_option_index:
			score += 1
	total = len(answers)
	percentage = 0.0 if total == 0 else (score / total) * 100
	return Score(score, total, percentage)


def score_submission(db: Session, answers: Sequence[AnswerIn]) -> Score:
	questions = find_by_ids(db, {a.question_id for a in answers})
	return score_answers(answers, questions)
