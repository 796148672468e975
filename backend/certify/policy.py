from __future__ import annotations
from typing import NamedTuple

from .taxonomy import CERTIFICATION_BANDS, NO_CERTIFICATION


class Decision(NamedTuple):
	certification: str
	proceed: bool


def decide(step: int, percentage: float) -> Decision:
	"""Map a step and percentage to a certification label and proceed flag.

	Upper bounds are exclusive: 25 is the first A1 percentage on step 1,
	75 the first one that allows proceeding.
	"""
	bands = CERTIFICATION_BANDS.get(step)
	if not bands:
		return Decision(NO_CERTIFICATION, False)
	for upper, certification, proceed in bands:
		if upper is None or percentage < upper:
			return Decision(certification, proceed)
	return Decision(NO_CERTIFICATION, False)


def issues_certificate(certification: str) -> bool:
	if certification in ("Fail", NO_CERTIFICATION):
		return False
	return not certification.startswith("Remain")
