from __future__ import annotations
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
	# Wire format is camelCase; ORM rows are read by attribute
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AnswerIn(CamelModel):
	question_id: str
	# -1 (or any non-matching index) means unanswered / wrong
	selected_index: int


class QuestionIn(CamelModel):
	step: int
	level: str
	question_text: str
	options: List[str]
	correct_option_index: int = Field(ge=0, le=3)

	@field_validator("level", "question_text")
	@classmethod
	def _not_blank(cls, value: str) -> str:
		value = value.strip()
		if not value:
			raise ValueError("must not be empty")
		return value

	@field_validator("options")
	@classmethod
	def _four_options(cls, value: List[str]) -> List[str]:
		if len(value) != 4 or any(not opt.strip() for opt in value):
			raise ValueError("Options must be an array of 4 non-empty strings")
		return value


class ClientQuestion(CamelModel):
	"""A question as handed to the exam taker: no correct answer field."""
	id: str
	question_text: str
	options: List[str]
	step: int
	level: str


class QuestionOut(ClientQuestion):
	correct_option_index: int
	created_at: datetime
	updated_at: datetime


class SubmitRequest(CamelModel):
	user_id: Optional[str] = None
	name: str
	email: Optional[str] = None
	step: int
	level: Optional[str] = None
	answers: List[AnswerIn]

	@field_validator("name")
	@classmethod
	def _name_required(cls, value: str) -> str:
		if not value.strip():
			raise ValueError("name is required")
		return value

	@field_validator("user_id", "email", "level")
	@classmethod
	def _empty_as_none(cls, value: Optional[str]) -> Optional[str]:
		return value or None


class ResultOut(CamelModel):
	id: str
	user_id: Optional[str] = None
	name: str
	email: Optional[str] = None
	step: int
	level: str
	score: int
	total: int
	percentage: float
	certification: str
	answers: List[AnswerIn]
	created_at: datetime
	updated_at: datetime


class SubmitResponse(CamelModel):
	saved_result: ResultOut
	certification: str
	percentage: float
	proceed_to_next_step: bool
	certificate_url: Optional[str] = None


class ExamSummary(CamelModel):
	id: str
	step: int
	level: str
	score: int
	total: int
	percentage: float
	certification: str
	date: datetime
	certificate_url: Optional[str] = None


class ResultSummary(ExamSummary):
	user_id: Optional[str] = None
	name: str
	email: Optional[str] = None
	updated_at: datetime


class VisitOut(CamelModel):
	ip: str
	country: str
	city: str
	timestamp: datetime
