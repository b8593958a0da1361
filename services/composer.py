# services/composer.py
import logging
import random
from typing import List, Optional

from services.balancer import BalanceOptions, balance_questions
from services.query_builder import build_question_query, split_csv
from services.review_scheduler import parse_tracked_questions, schedule_review_questions

logger = logging.getLogger(__name__)


def balance_options_for(params) -> BalanceOptions:
    # Difficulty is only balanced when the caller did not pick difficulties themselves
    topics = list(dict.fromkeys(split_csv(params.topic)))
    return BalanceOptions(topics=topics, balance_difficulty=not split_csv(params.difficulty_level))


async def compose_questions(
    store,
    params,
    student_view: bool = False,
    rng: Optional[random.Random] = None,
) -> List[dict]:
    """Select one page of balanced questions for a filter request.

    Every call re-queries and re-shuffles, so consecutive pages are not
    guaranteed to be disjoint or to cover the whole matching set.
    """
    rng = rng or random.Random()
    query = build_question_query(params, student_view=student_view)
    options = balance_options_for(params)
    page, limit = params.page, params.amount
    target = page * limit

    tracked = parse_tracked_questions(params.trackedQuestions) if params.userId else {}
    if tracked:
        logger.info(f"Composing review set for user {params.userId} with {len(tracked)} tracked questions")
        selected = await schedule_review_questions(store, query, tracked, target, options, rng)
    else:
        candidates = await store.find(query)
        selected = balance_questions(candidates, target, options, rng)

    skip = (page - 1) * limit
    questions = selected[skip:skip + limit]
    logger.info(f"Found {len(questions)} questions for page {page}, limit {limit}, skip {skip}")
    return questions
