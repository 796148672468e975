from __future__ import annotations
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Float, JSON, UniqueConstraint
from .db import Base


def _new_id() -> str:
	return uuid.uuid4().hex


class AdminUser(Base):
	__tablename__ = "admin_users"
	# Primary key is the (lower-cased) email address
	email = Column(String(256), primary_key=True, index=True)
	password_hash = Column(String(256), nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Question(Base):
	__tablename__ = "questions"
	id = Column(String(32), primary_key=True, default=_new_id)
	step = Column(Integer, nullable=False, index=True)
	level = Column(String(8), nullable=False, index=True)
	question_text = Column(String(2048), nullable=False)
	# Exactly four option strings
	options = Column(JSON, nullable=False)
	correct_option_index = Column(Integer, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ExamResult(Base):
	__tablename__ = "exam_results"
	# NULL user ids never conflict, so anonymous attempts always insert
	__table_args__ = (UniqueConstraint("user_id", "step", name="uq_exam_results_user_step"),)

	id = Column(String(32), primary_key=True, default=_new_id)
	user_id = Column(String(128), nullable=True, index=True)
	name = Column(String(256), nullable=False)
	email = Column(String(256), nullable=True)
	step = Column(Integer, nullable=False)
	level = Column(String(16), nullable=False)
	score = Column(Integer, nullable=False)
	total = Column(Integer, nullable=False)
	percentage = Column(Float, nullable=False)
	certification = Column(String(64), nullable=False)
	# Soft references: [{"questionId": ..., "selectedIndex": ...}]
	answers = Column(JSON, nullable=False, default=list)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
	updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class Visit(Base):
	__tablename__ = "visits"
	id = Column(Integer, primary_key=True, autoincrement=True)
	ip = Column(String(64), nullable=False)
	country = Column(String(128), nullable=False)
	city = Column(String(128), nullable=False)
	timestamp = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
