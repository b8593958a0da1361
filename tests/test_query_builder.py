import pytest

from models.question_filter import QuestionFilter
from services.query_builder import build_question_query, split_csv


def make_filter(**fields):
    return QuestionFilter.model_validate(fields)


def test_empty_filter_has_no_constraints():
    assert build_question_query(make_filter()) == {}


def test_single_value_fields_match_exactly():
    query = build_question_query(make_filter(education_board="CBSE", **{"class": "10"}, subject="Mathematics"))
    assert query == {"education_board": "CBSE", "class": "10", "subject": "Mathematics"}


def test_board_alias_is_accepted():
    assert build_question_query(make_filter(board="ICSE")) == {"education_board": "ICSE"}


def test_multi_value_fields_are_split_and_trimmed():
    query = build_question_query(make_filter(topic="Algebra, Geometry ", difficulty_level="easy,hard", q_type="MCQ"))
    assert query["topic"] == {"$in": ["Algebra", "Geometry"]}
    assert query["difficulty_level"] == {"$in": ["easy", "hard"]}
    assert query["q_type"] == {"$in": ["MCQ"]}


def test_blank_multi_value_field_is_ignored():
    assert build_question_query(make_filter(topic="  ", q_type="")) == {}


def test_split_csv_drops_empty_parts():
    assert split_csv("a,,b, ") == ["a", "b"]
    assert split_csv(None) == []


@pytest.mark.parametrize("q_number,expected", [("12", 12), (7, 7), ("abc", None), ("", None)])
def test_question_number(q_number, expected):
    query = build_question_query(make_filter(q_number=q_number))
    assert query.get("q_number") == expected


def test_moderator_view_requires_reviewed_questions():
    query = build_question_query(make_filter(moderatorView=True, inCourse="No"))
    assert query["inCourse"] is True
    assert query["isCorrect"] is True
    assert query["DPS_approved"] is True


def test_student_view_always_requires_approval():
    query = build_question_query(make_filter(DPS_approved="No,Unmarked"), student_view=True)
    assert query["DPS_approved"] is True


def test_tri_state_flags_do_not_overwrite_each_other():
    query = build_question_query(make_filter(inCourse="Yes,Unmarked", isCorrect="No,Unmarked"))
    assert query == {"inCourse": {"$ne": False}, "isCorrect": {"$ne": True}}


@pytest.fixture
async def flagged_questions(db, question_factory):
    questions = (
        [question_factory(inCourse=True, label="yes") for _ in range(3)]
        + [question_factory(inCourse=False, label="no") for _ in range(3)]
        + [question_factory(label="unset") for _ in range(3)]
    )
    await db.Questions.insert_many(questions)
    return questions


@pytest.mark.parametrize("selection,expected_labels", [
    ("Yes,No", {"yes", "no"}),
    ("Yes,Unmarked", {"yes", "unset"}),
    ("No,Unmarked", {"no", "unset"}),
    ("Yes", {"yes"}),
    ("No", {"no"}),
    ("Unmarked", {"unset"}),
    ("Yes,No,Unmarked", {"yes", "no", "unset"}),
    ("", {"yes", "no", "unset"}),
])
async def test_tri_state_selection_matches_documents(db, flagged_questions, selection, expected_labels):
    query = build_question_query(make_filter(inCourse=selection))
    found = await db.Questions.find(query).to_list(None)
    expected = [q for q in flagged_questions if q["label"] in expected_labels]
    assert sorted(str(q["_id"]) for q in found) == sorted(str(q["_id"]) for q in expected)
