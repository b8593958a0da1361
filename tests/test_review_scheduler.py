import random

import pytest

from services.balancer import BalanceOptions
from services.question_store import QuestionStore
from services.review_scheduler import (
    ReviewQuotas,
    parse_tracked_questions,
    partition_tracked,
    schedule_review_questions,
)


def test_quotas_for_twenty():
    quotas = ReviewQuotas.for_total(20)
    assert (quotas.min_failed, quotas.min_unsure, quotas.max_fresh) == (5, 3, 12)


def test_quotas_never_go_negative():
    assert ReviewQuotas.for_total(1).max_fresh == 0


def test_fresh_shortfall_moves_sixty_percent_to_failed():
    quotas = ReviewQuotas.for_total(20)
    assert quotas.failed_target(12) == 5
    assert quotas.failed_target(7) == 5 + 3


def test_unsure_target_grows_only_when_fresh_and_failed_fall_short():
    quotas = ReviewQuotas.for_total(20)
    assert quotas.unsure_target(fresh_count=7, failed_count=8) == 3
    assert quotas.unsure_target(fresh_count=12, failed_count=2) == 3
    # fresh short by 5 (3 of it moved to failed), failed short by 2
    assert quotas.unsure_target(fresh_count=7, failed_count=6) == 3 + 2 + 2


@pytest.mark.parametrize("raw", ["{not json", "[1, 2]", "", None, 42])
def test_unusable_tracking_payload_is_empty(raw):
    assert parse_tracked_questions(raw) == {}


def test_tracking_payload_from_json_string():
    tracked = parse_tracked_questions('{"a": {"status": "failed", "timestamp": 1}}')
    assert tracked == {"a": {"status": "failed", "timestamp": 1}}


def test_partition_by_status():
    pools = partition_tracked({
        "a": {"status": "failed"},
        "b": {"status": "unsure"},
        "c": {"status": "success"},
        "d": {"status": "bogus"},
        "e": "not a record",
    })
    assert pools == {"failed": {"a"}, "unsure": {"b"}, "success": {"c"}}


async def seed_pools(db, question_factory, fresh, failed, unsure, success=0):
    pools = {}
    tracked = {}
    for status, count in [("fresh", fresh), ("failed", failed), ("unsure", unsure), ("success", success)]:
        questions = [question_factory(label=status) for _ in range(count)]
        pools[status] = questions
        if status != "fresh":
            tracked.update({str(q["_id"]): {"status": status, "timestamp": 1, "attempts": 1} for q in questions})
    await db.Questions.insert_many([q for qs in pools.values() for q in qs])
    return tracked


def count_labels(questions):
    labels = {}
    for q in questions:
        labels[q["label"]] = labels.get(q["label"], 0) + 1
    return labels


async def test_review_floors_are_met(db, question_factory):
    tracked = await seed_pools(db, question_factory, fresh=15, failed=6, unsure=4, success=2)
    selected = await schedule_review_questions(QuestionStore(db.Questions), {}, tracked, 20, BalanceOptions(), random.Random(5))
    labels = count_labels(selected)
    assert len(selected) == 20
    assert labels.get("failed", 0) >= 5
    assert labels.get("unsure", 0) >= 3
    assert len({q["_id"] for q in selected}) == 20


async def test_fresh_shortfall_is_taken_from_failed(db, question_factory):
    tracked = await seed_pools(db, question_factory, fresh=7, failed=10, unsure=10)
    selected = await schedule_review_questions(QuestionStore(db.Questions), {}, tracked, 20, BalanceOptions(), random.Random(9))
    labels = count_labels(selected)
    assert len(selected) == 20
    assert labels["fresh"] == 7
    assert labels["failed"] >= 8
    assert labels["unsure"] >= 3


async def test_small_corpus_returns_everything(db, question_factory):
    tracked = await seed_pools(db, question_factory, fresh=2, failed=1, unsure=1, success=1)
    selected = await schedule_review_questions(QuestionStore(db.Questions), {}, tracked, 20, BalanceOptions(), random.Random(1))
    assert len(selected) == 5


async def test_invalid_tracked_ids_are_ignored(db, question_factory):
    await db.Questions.insert_many([question_factory(label="fresh") for _ in range(10)])
    tracked = {"not-an-object-id": {"status": "failed"}}
    selected = await schedule_review_questions(QuestionStore(db.Questions), {}, tracked, 4, BalanceOptions(), random.Random(2))
    assert len(selected) == 4


async def test_pools_respect_the_query(db, question_factory):
    tracked = await seed_pools(db, question_factory, fresh=10, failed=5, unsure=5)
    await db.Questions.insert_many([question_factory(subject="Physics", label="other") for _ in range(10)])
    selected = await schedule_review_questions(
        QuestionStore(db.Questions), {"subject": "Mathematics"}, tracked, 10, BalanceOptions(), random.Random(4)
    )
    assert len(selected) == 10
    assert all(q["subject"] == "Mathematics" for q in selected)
