"""Certification decision table and certificate eligibility."""
import pytest

from certify.policy import Decision, decide, issues_certificate


class TestStepOne:
	@pytest.mark.parametrize("pct,expected", [
		(0, Decision("Fail", False)),
		(24.999, Decision("Fail", False)),
		(25, Decision("A1 certified", False)),
		(49.999, Decision("A1 certified", False)),
		(50, Decision("A2 certified", False)),
		(74.999, Decision("A2 certified", False)),
		(75, Decision("A2 certified", True)),
		(100, Decision("A2 certified", True)),
	])
	def test_boundaries(self, pct, expected):
		assert decide(1, pct) == expected

	def test_every_percentage_maps_to_known_label(self):
		labels = {decide(1, p / 10).certification for p in range(0, 1001)}
		assert labels == {"Fail", "A1 certified", "A2 certified"}


class TestStepTwo:
	@pytest.mark.parametrize("pct,expected", [
		(10, Decision("Remain at A2", False)),
		(25, Decision("B1 certified", False)),
		(50, Decision("B2 certified", False)),
		(74.9, Decision("B2 certified", False)),
		(75, Decision("B2 certified", True)),
	])
	def test_boundaries(self, pct, expected):
		assert decide(2, pct) == expected


class TestStepThree:
	def test_below_quarter_remains(self):
		assert decide(3, 24.9) == Decision("Remain at B2", False)

	def test_c1_band(self):
		assert decide(3, 25) == Decision("C1 certified", False)

	def test_no_top_bucket(self):
		assert decide(3, 50) == Decision("C2 certified", False)
		assert decide(3, 75) == Decision("C2 certified", False)
		assert decide(3, 100) == Decision("C2 certified", False)


def test_unknown_step_has_no_certification():
	assert decide(4, 100) == Decision("No certification", False)
	assert decide(0, 0) == Decision("No certification", False)


@pytest.mark.parametrize("label,expected", [
	("Fail", False),
	("Remain at A2", False),
	("Remain at B2", False),
	("No certification", False),
	("A1 certified", True),
	("A2 certified", True),
	("C2 certified", True),
])
def test_issues_certificate(label, expected):
	assert issues_certificate(label) is expected
