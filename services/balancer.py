# services/balancer.py
"""
Stratified random sampling of candidate questions.

Difficulty balancing aims for roughly 30% easy, 50% medium and 20% hard
(with at least one hard question whenever one exists). Topic balancing
splits the target evenly across the requested topics. Buckets that run dry
are topped up from whatever is left, so the target is met whenever the
candidates allow it.

When topics are balanced the pool is split by topic first and each topic
group is then difficulty-balanced to its share; balancing difficulty over
the whole pool first could leave a topic without enough questions.
"""
import math
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

DIFFICULTY_LEVELS = ("easy", "medium", "hard")

EASY_SHARE = 0.3
HARD_SHARE = 0.2


@dataclass
class BalanceOptions:
    topics: List[str] = field(default_factory=list)
    balance_difficulty: bool = True


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def difficulty_of(question: dict) -> str:
    return str(question.get("difficulty_level") or "").strip().lower()


def topics_of(question: dict) -> List[str]:
    topic = question.get("topic")
    if isinstance(topic, (list, tuple)):
        return [str(t).strip() for t in topic]
    if topic is None:
        return []
    return [str(topic).strip()]


def difficulty_quotas(target: int, available: Dict[str, int]) -> Dict[str, int]:
    hard_available = available.get("hard", 0)
    hard = min(target, hard_available, max(1 if hard_available else 0, round_half_up(HARD_SHARE * target)))
    easy = min(available.get("easy", 0), round_half_up(EASY_SHARE * target))
    medium = min(available.get("medium", 0), max(0, target - easy - hard))
    return {"easy": easy, "medium": medium, "hard": hard}


def topic_quotas(target: int, topics: Sequence[str]) -> Dict[str, int]:
    base, remainder = divmod(target, len(topics))
    return {topic: base + (1 if i < remainder else 0) for i, topic in enumerate(topics)}


def _top_up(selected: list, pool: Sequence[dict], target: int, rng: random.Random) -> list:
    if len(selected) >= target:
        return selected
    chosen = {id(q) for q in selected}
    leftover = [q for q in pool if id(q) not in chosen]
    selected.extend(rng.sample(leftover, min(target - len(selected), len(leftover))))
    return selected


def balance_by_difficulty(questions: Sequence[dict], target: int, rng: random.Random) -> List[dict]:
    buckets: Dict[str, List[dict]] = {level: [] for level in DIFFICULTY_LEVELS}
    for question in questions:
        level = difficulty_of(question)
        if level in buckets:
            buckets[level].append(question)

    quotas = difficulty_quotas(target, {level: len(bucket) for level, bucket in buckets.items()})
    selected: List[dict] = []
    for level, count in quotas.items():
        selected.extend(rng.sample(buckets[level], count))
    return _top_up(selected, questions, target, rng)


def assign_topics(questions: Sequence[dict], topics: Sequence[str], rng: random.Random) -> Dict[str, List[dict]]:
    """Put every question into exactly one of its requested topics; others are dropped."""
    groups: Dict[str, List[dict]] = {topic: [] for topic in topics}
    for question in questions:
        own = set(topics_of(question))
        matching = [topic for topic in topics if topic in own]
        if matching:
            groups[rng.choice(matching)].append(question)
    return groups


def balance_by_topic(
    questions: Sequence[dict],
    target: int,
    topics: Sequence[str],
    rng: random.Random,
    balance_difficulty: bool = True,
) -> List[dict]:
    groups = assign_topics(questions, topics, rng)
    quotas = topic_quotas(target, topics)

    selected: List[dict] = []
    leftover: List[dict] = []
    for topic, group in groups.items():
        quota = quotas[topic]
        if len(group) <= quota:
            picked = list(group)
        elif balance_difficulty:
            picked = balance_by_difficulty(group, quota, rng)
        else:
            picked = rng.sample(group, quota)
        picked_ids = {id(q) for q in picked}
        selected.extend(picked)
        leftover.extend(q for q in group if id(q) not in picked_ids)

    _top_up(selected, leftover, target, rng)
    return selected[:target]


def balance_questions(
    questions: Sequence[dict],
    limit: int,
    options: Optional[BalanceOptions] = None,
    rng: Optional[random.Random] = None,
) -> List[dict]:
    """Pick a representative random subset of at most ``limit`` questions.

    When there are no more candidates than ``limit`` the input is returned
    as is. Otherwise the result is balanced by topic (two or more topics
    requested, each topic group balanced by difficulty) or by difficulty
    alone, and shuffled.
    """
    if limit <= 0:
        return []
    if len(questions) <= limit:
        return list(questions)

    options = options or BalanceOptions()
    rng = rng or random.Random()

    if len(options.topics) >= 2:
        selected = balance_by_topic(questions, limit, options.topics, rng, options.balance_difficulty)
    elif options.balance_difficulty:
        selected = balance_by_difficulty(questions, limit, rng)
    else:
        selected = rng.sample(list(questions), limit)

    rng.shuffle(selected)
    return selected
