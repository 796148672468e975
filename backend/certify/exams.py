from __future__ import annotations
import logging
from typing import NamedTuple, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from . import ledger
from .certificates import CertificateRenderer
from .errors import ConflictError, StorageError
from .models import ExamResult
from .policy import decide
from .schemas import SubmitRequest
from .scoring import score_submission
from .taxonomy import default_level_label


logger = logging.getLogger(__name__)

RETAKE_BLOCKED_STEP = 1


class SubmissionOutcome(NamedTuple):
	result: ExamResult
	certification: str
	percentage: float
	proceed: bool
	certificate_url: Optional[str]


def check_retake_allowed(db: Session, user_id: Optional[str], step: int) -> None:
	# Only step 1 is gated: a Fail there is final
	if not user_id or step != RETAKE_BLOCKED_STEP:
		return
	latest = ledger.find_latest_for_user_step(db, user_id, RETAKE_BLOCKED_STEP)
	if latest is not None and latest.certification == "Fail":
		raise ConflictError("No retake allowed after Fail on Step 1")


def submit_exam(db: Session, submission: SubmitRequest, renderer: CertificateRenderer) -> SubmissionOutcome:
	"""Score a submission, record it and issue a certificate when earned.

	The result row and the certificate file succeed or fail together: nothing
	is committed until the certificate (if any) is on disk.
	"""
	check_retake_allowed(db, submission.user_id, submission.step)

	scored = score_submission(db, submission.answers)
	decision = decide(submission.step, scored.percentage)

	values = {
		"name": submission.name,
		"email": submission.email,
		"level": submission.level or default_level_label(submission.step),
		"score": scored.score,
		"total": scored.total,
		"percentage": scored.percentage,
		"certification": decision.certification,
		"answers": [a.model_dump(by_alias=True) for a in submission.answers],
	}
	with ledger.result_write_lock(db, submission.user_id, submission.step):
		result = ledger.upsert_result(db, submission.user_id, submission.step, values)
		try:
			certificate_url = renderer.render(result)
			db.commit()
			db.refresh(result)
		except StorageError:
			db.rollback()
			raise
		except SQLAlchemyError as exc:
			db.rollback()
			logger.exception("Failed to commit result %s", result.id)
			raise StorageError("Failed to save or update result") from exc

	logger.info(
		"Exam submitted: user=%s step=%s score=%s/%s certification=%s",
		submission.user_id, submission.step, scored.score, scored.total, decision.certification,
	)
	return SubmissionOutcome(result, decision.certification, scored.percentage, decision.proceed, certificate_url)
