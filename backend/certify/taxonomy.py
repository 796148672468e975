from __future__ import annotations
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from .errors import ValidationError


STEP_LEVELS: Mapping[int, Tuple[str, str]] = MappingProxyType({
	1: ("A1", "A2"),
	2: ("B1", "B2"),
	3: ("C1", "C2"),
})

NO_CERTIFICATION = "No certification"

# Rows are (exclusive upper bound or None, certification, proceed to next step),
# checked in order against the percentage.
Band = Tuple[Optional[float], str, bool]

CERTIFICATION_BANDS: Mapping[int, Tuple[Band, ...]] = MappingProxyType({
	1: (
		(25, "Fail", False),
		(50, "A1 certified", False),
		(75, "A2 certified", False),
		(None, "A2 certified", True),
	),
	2: (
		(25, "Remain at A2", False),
		(50, "B1 certified", False),
		(75, "B2 certified", False),
		(None, "B2 certified", True),
	),
	# Step 3 is the last step, so nothing proceeds
	3: (
		(25, "Remain at B2", False),
		(50, "C1 certified", False),
		(None, "C2 certified", False),
	),
})


def levels_for_step(step: int) -> Tuple[str, str]:
	try:
		return STEP_LEVELS[step]
	except (KeyError, TypeError):
		steps = ",".join(str(s) for s in STEP_LEVELS)
		raise ValidationError(f"step must be one of {steps}") from None


def default_level_label(step: int) -> str:
	return "/".join(STEP_LEVELS.get(step, ()))
