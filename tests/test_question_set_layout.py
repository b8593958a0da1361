import pytest

from services.question_sets import (
    QuestionSetLayoutError,
    arrange_dps_sections,
    missing_dps_slot,
    order_dps_question_ids,
)


def test_untyped_and_surplus_questions_are_left_out(question_factory):
    questions = [question_factory(q_type="LA") for _ in range(6)] + [question_factory(q_type="Essay")]
    slots = arrange_dps_sections(questions)
    assert len(slots[("D", "LA")]) == 4
    assert sum(len(s) for s in slots.values()) == 4


def test_first_missing_slot_is_reported(question_factory):
    slots = arrange_dps_sections([question_factory(q_type="MCQ") for _ in range(18)])
    assert missing_dps_slot(slots) == "Need 2 more A-R questions for Section A"


def test_incomplete_layout_raises(question_factory):
    with pytest.raises(QuestionSetLayoutError):
        order_dps_question_ids([question_factory(q_type="MCQ")])
