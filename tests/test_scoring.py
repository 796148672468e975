from types import SimpleNamespace

import pytest

from certify.schemas import AnswerIn
from certify.scoring import score_answers, score_submission


def _answer(qid, idx):
	return AnswerIn(question_id=qid, selected_index=idx)


def test_missing_question_counts_in_total():
	bank = {
		"q1": SimpleNamespace(correct_option_index=2),
		"q2": SimpleNamespace(correct_option_index=0),
	}
	answers = [_answer("q1", 2), _answer("q2", 3), _answer("q_missing", 1)]

	result = score_answers(answers, bank)

	assert result.score == 1
	assert result.total == 3
	assert result.percentage == pytest.approx(33.33, abs=0.01)


def test_unanswered_scores_zero():
	bank = {"q1": SimpleNamespace(correct_option_index=0)}
	result = score_answers([_answer("q1", -1)], bank)
	assert (result.score, result.total, result.percentage) == (0, 1, 0.0)


def test_empty_answers_is_zero_percent():
	result = score_answers([], {})
	assert result.score == 0
	assert result.total == 0
	assert result.percentage == 0


def test_all_correct():
	bank = {f"q{i}": SimpleNamespace(correct_option_index=i % 4) for i in range(8)}
	answers = [_answer(f"q{i}", i % 4) for i in range(8)]
	assert score_answers(answers, bank).percentage == 100


def test_score_submission_against_database(db, step1_bank):
	q1, q2 = step1_bank[0], step1_bank[1]
	answers = [_answer(q1.id, 0), _answer(q2.id, 1), _answer("not-a-real-id", 0)]

	result = score_submission(db, answers)

	assert (result.score, result.total) == (1, 3)
	assert result.percentage == pytest.approx(33.333, abs=0.001)
