import pytest

from certify.errors import ValidationError
from certify.taxonomy import CERTIFICATION_BANDS, STEP_LEVELS, default_level_label, levels_for_step


def test_levels_for_known_steps():
	assert levels_for_step(1) == ("A1", "A2")
	assert levels_for_step(2) == ("B1", "B2")
	assert levels_for_step(3) == ("C1", "C2")


@pytest.mark.parametrize("step", [0, 4, -1])
def test_unknown_step_rejected(step):
	with pytest.raises(ValidationError):
		levels_for_step(step)


def test_tables_are_read_only():
	with pytest.raises(TypeError):
		STEP_LEVELS[4] = ("X1", "X2")
	with pytest.raises(TypeError):
		CERTIFICATION_BANDS[1] = ()


def test_default_level_label():
	assert default_level_label(2) == "B1/B2"
	assert default_level_label(9) == ""
