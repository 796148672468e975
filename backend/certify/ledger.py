from __future__ import annotations
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .errors import StorageError
from .models import ExamResult


logger = logging.getLogger(__name__)

# Dialects with a native INSERT ... ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
	"sqlite": sqlite_insert,
	"postgresql": pg_insert,
}

# Fixed pool of re-entrant locks striped by (user_id, step). Used only where
# the dialect has no conditional upsert.
LOCK_STRIPES = 64
_key_locks: Tuple[threading.RLock, ...] = tuple(threading.RLock() for _ in range(LOCK_STRIPES))


def _lock_for(user_id: str, step: int) -> threading.RLock:
	return _key_locks[hash((user_id, step)) % LOCK_STRIPES]


def has_native_upsert(db: Session) -> bool:
	return db.get_bind().dialect.name in _UPSERT_INSERTS


@contextmanager
def result_write_lock(db: Session, user_id: Optional[str], step: int) -> Iterator[None]:
	"""Serialize writers of one (user_id, step) until the caller commits.

	A no-op for anonymous results and for dialects with a native upsert.
	"""
	if user_id is None or has_native_upsert(db):
		yield
		return
	with _lock_for(user_id, step):
		yield


def upsert_result(db: Session, user_id: Optional[str], step: int, values: Dict[str, Any]) -> ExamResult:
	"""Create or overwrite the result for (user_id, step).

	Anonymous results (user_id None) are always inserted. The write is flushed
	but not committed; the caller owns the transaction and, on dialects
	without a native upsert, must hold `result_write_lock` until it commits.
	"""
	now = datetime.utcnow()
	try:
		if user_id is None:
			row = ExamResult(id=uuid.uuid4().hex, user_id=None, step=step, created_at=now, updated_at=now, **values)
			db.add(row)
			db.flush()
			return row

		insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
		if insert is not None:
			stmt = insert(ExamResult).values(
				id=uuid.uuid4().hex,
				user_id=user_id,
				step=step,
				created_at=now,
				updated_at=now,
				**values,
			)
			# id and created_at survive an overwrite
			update_cols = list(values) + ["updated_at"]
			stmt = stmt.on_conflict_do_update(
				index_elements=[ExamResult.user_id, ExamResult.step],
				set_={col: stmt.excluded[col] for col in update_cols},
			)
			db.execute(stmt)
		else:
			with _lock_for(user_id, step):
				row = db.query(ExamResult).filter_by(user_id=user_id, step=step).first()
				if row is None:
					db.add(ExamResult(id=uuid.uuid4().hex, user_id=user_id, step=step, created_at=now, updated_at=now, **values))
				else:
					for key, value in values.items():
						setattr(row, key, value)
					row.updated_at = now
				db.flush()

		return (
			db.query(ExamResult)
			.filter_by(user_id=user_id, step=step)
			.populate_existing()
			.one()
		)
	except SQLAlchemyError as exc:
		db.rollback()
		logger.exception("Failed to upsert result for user %s step %s", user_id, step)
		raise StorageError("Failed to save or update result") from exc


def find_latest_for_user_step(db: Session, user_id: str, step: int) -> Optional[ExamResult]:
	try:
		return (
			db.query(ExamResult)
			.filter(ExamResult.user_id == user_id, ExamResult.step == step)
			.order_by(ExamResult.created_at.desc())
			.first()
		)
	except SQLAlchemyError as exc:
		raise StorageError("Failed to read results") from exc


def find_all_for_user(db: Session, user_id: str) -> List[ExamResult]:
	try:
		return (
			db.query(ExamResult)
			.filter(ExamResult.user_id == user_id)
			.order_by(ExamResult.created_at.desc())
			.all()
		)
	except SQLAlchemyError as exc:
		raise StorageError("Failed to read results") from exc


def find_all(db: Session) -> List[ExamResult]:
	try:
		return db.query(ExamResult).order_by(ExamResult.created_at.desc()).all()
	except SQLAlchemyError as exc:
		raise StorageError("Failed to read results") from exc
