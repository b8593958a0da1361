# services/review_scheduler.py
"""
Mix fresh questions with ones the student previously failed or was unsure of.

At least 25% of a request is reserved for failed questions and 15% for
unsure ones. Whatever the fresh pool cannot supply shifts towards the
review pools, and anything still missing is backfilled from the rest of the
matching questions.
"""
import json
import logging
import math
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Set

from database import to_object_ids
from services.balancer import BalanceOptions, balance_questions

logger = logging.getLogger(__name__)

MIN_FAILED_SHARE = 0.25
MIN_UNSURE_SHARE = 0.15
FAILED_SHORTFALL_SHARE = 0.6


@dataclass
class ReviewQuotas:
    total: int
    min_failed: int
    min_unsure: int
    max_fresh: int

    @classmethod
    def for_total(cls, total: int) -> "ReviewQuotas":
        min_failed = math.ceil(MIN_FAILED_SHARE * total)
        min_unsure = math.ceil(MIN_UNSURE_SHARE * total)
        return cls(total, min_failed, min_unsure, max(0, total - min_failed - min_unsure))

    def failed_target(self, fresh_count: int) -> int:
        shortfall = max(0, self.max_fresh - fresh_count)
        return self.min_failed + math.floor(shortfall * FAILED_SHORTFALL_SHARE)

    def unsure_target(self, fresh_count: int, failed_count: int) -> int:
        fresh_shortfall = max(0, self.max_fresh - fresh_count)
        failed_target = self.failed_target(fresh_count)
        failed_shortfall = max(0, failed_target - failed_count)
        if fresh_shortfall and failed_shortfall:
            # the part of the fresh shortfall the failed pool was not asked for, plus what it missed
            shifted_to_failed = failed_target - self.min_failed
            return self.min_unsure + (fresh_shortfall - shifted_to_failed) + failed_shortfall
        return self.min_unsure


def parse_tracked_questions(raw: Any) -> Dict[str, dict]:
    if not raw:
        return {}
    if isinstance(raw, dict):
        tracked = raw
    else:
        try:
            tracked = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Ignoring malformed trackedQuestions payload: {e}")
            return {}
    if not isinstance(tracked, dict):
        logger.warning("Ignoring trackedQuestions payload that is not an object")
        return {}
    return tracked


def partition_tracked(tracked: Dict[str, dict]) -> Dict[str, Set[str]]:
    pools: Dict[str, Set[str]] = {"failed": set(), "unsure": set(), "success": set()}
    for question_id, entry in tracked.items():
        status = entry.get("status") if isinstance(entry, dict) else None
        if status in pools:
            pools[status].add(question_id)
    return pools


def _with_ids(query: Dict[str, Any], condition: Dict[str, Any]) -> Dict[str, Any]:
    return {"$and": [query, {"_id": condition}]}


async def schedule_review_questions(
    store,
    query: Dict[str, Any],
    tracked: Dict[str, dict],
    total: int,
    options: Optional[BalanceOptions] = None,
    rng: Optional[random.Random] = None,
) -> List[dict]:
    rng = rng or random.Random()
    pools = partition_tracked(tracked)
    failed_ids = to_object_ids(pools["failed"], "tracked question id")
    unsure_ids = to_object_ids(pools["unsure"], "tracked question id")
    attempted_ids = failed_ids + unsure_ids + to_object_ids(pools["success"], "tracked question id")
    quotas = ReviewQuotas.for_total(total)

    fresh_pool = await store.find(_with_ids(query, {"$nin": attempted_ids}))
    fresh = balance_questions(fresh_pool, quotas.max_fresh, options, rng)

    failed_target = quotas.failed_target(len(fresh))
    failed_pool = await store.find(_with_ids(query, {"$in": failed_ids})) if failed_ids else []
    failed = balance_questions(failed_pool, failed_target, options, rng)

    unsure_target = quotas.unsure_target(len(fresh), len(failed))
    unsure_pool = await store.find(_with_ids(query, {"$in": unsure_ids})) if unsure_ids else []
    unsure = balance_questions(unsure_pool, unsure_target, options, rng)

    logger.info(
        f"Review mix for {total}: fresh {len(fresh)}/{quotas.max_fresh}, "
        f"failed {len(failed)}/{failed_target}, unsure {len(unsure)}/{unsure_target}"
    )

    selected = fresh + failed + unsure
    if len(selected) < total:
        used_ids = [q["_id"] for q in selected]
        remaining = await store.find(_with_ids(query, {"$nin": used_ids}))
        selected.extend(balance_questions(remaining, total - len(selected), options, rng))

    rng.shuffle(selected)
    return selected[:total]
