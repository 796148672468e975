class CertifyError(Exception):
	"""Base class for errors raised by the exam and question services."""


class ValidationError(CertifyError):
	"""Malformed submission or an unknown step."""


class NotFoundError(CertifyError):
	"""A question addressed by id does not exist.

	Only the admin question bank raises this. Scoring treats unresolved
	question references as wrong answers instead.
	"""


class ConflictError(CertifyError):
	"""The submission is not allowed, e.g. a retake after failing step 1."""


class StorageError(CertifyError):
	"""Ledger or certificate I/O failed; nothing from the request is committed."""
