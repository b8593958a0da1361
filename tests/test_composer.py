import json
import random

from models.question_filter import QuestionFilter
from services.composer import balance_options_for, compose_questions
from services.question_store import QuestionStore


def make_filter(**fields):
    return QuestionFilter.model_validate(fields)


async def seed(db, questions):
    await db.Questions.insert_many(questions)
    return questions


async def test_small_result_is_the_matching_set(db, question_factory):
    matching = await seed(db, [question_factory(subject="Mathematics") for _ in range(8)])
    await seed(db, [question_factory(subject="Physics") for _ in range(5)])

    selected = await compose_questions(QuestionStore(db.Questions), make_filter(subject="Mathematics", amount=20))
    assert sorted(str(q["_id"]) for q in selected) == sorted(str(q["_id"]) for q in matching)


async def test_page_is_limited_to_amount(db, question_factory):
    await seed(db, [question_factory(difficulty_level=level) for level in ["easy", "medium", "hard"] * 10])
    store = QuestionStore(db.Questions)

    first = await compose_questions(store, make_filter(amount=5), rng=random.Random(1))
    second = await compose_questions(store, make_filter(amount=5, page=2), rng=random.Random(1))
    assert len(first) == 5
    assert len(second) == 5


async def test_page_beyond_the_corpus_is_empty(db, question_factory):
    await seed(db, [question_factory() for _ in range(4)])
    selected = await compose_questions(QuestionStore(db.Questions), make_filter(amount=5, page=2))
    assert selected == []


async def test_student_view_only_returns_approved(db, question_factory):
    await seed(db, [question_factory(DPS_approved=True) for _ in range(3)])
    await seed(db, [question_factory(DPS_approved=False) for _ in range(3)])
    await seed(db, [question_factory(DPS_approved=None) for _ in range(3)])

    selected = await compose_questions(QuestionStore(db.Questions), make_filter(), student_view=True)
    assert len(selected) == 3
    assert all(q["DPS_approved"] is True for q in selected)


async def test_malformed_tracking_behaves_like_no_tracking(db, question_factory):
    await seed(db, [question_factory(difficulty_level=level) for level in ["easy", "medium", "hard"] * 10])
    store = QuestionStore(db.Questions)

    plain = await compose_questions(store, make_filter(amount=6), rng=random.Random(11))
    malformed = await compose_questions(
        store, make_filter(amount=6, userId="u1", trackedQuestions="{oops"), rng=random.Random(11)
    )
    assert [q["_id"] for q in malformed] == [q["_id"] for q in plain]


async def test_tracking_needs_a_user(db, question_factory):
    questions = await seed(db, [question_factory() for _ in range(30)])
    tracked = json.dumps({str(q["_id"]): {"status": "failed"} for q in questions[:10]})
    store = QuestionStore(db.Questions)

    anonymous = await compose_questions(store, make_filter(amount=8, trackedQuestions=tracked), rng=random.Random(3))
    plain = await compose_questions(store, make_filter(amount=8), rng=random.Random(3))
    assert [q["_id"] for q in anonymous] == [q["_id"] for q in plain]


async def test_tracked_user_gets_failed_questions_back(db, question_factory):
    questions = await seed(db, [question_factory() for _ in range(40)])
    failed = {str(q["_id"]) for q in questions[:6]}
    tracked = json.dumps({qid: {"status": "failed", "timestamp": 1, "attempts": 2} for qid in failed})

    selected = await compose_questions(
        QuestionStore(db.Questions), make_filter(amount=20, userId="u1", trackedQuestions=tracked)
    )
    assert len(selected) == 20
    assert len(failed & {str(q["_id"]) for q in selected}) >= 5


def test_difficulty_filter_turns_off_difficulty_balancing():
    options = balance_options_for(make_filter(topic="Algebra,Geometry,Algebra", difficulty_level="hard"))
    assert options.topics == ["Algebra", "Geometry"]
    assert options.balance_difficulty is False
