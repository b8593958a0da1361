# services/query_builder.py
"""Translate the flat question filter into a MongoDB predicate."""
import copy
import logging
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SINGLE_VALUE_FIELDS = {
    "education_board": "education_board",
    "class_": "class",
    "subject": "subject",
}

MULTI_VALUE_FIELDS = ("topic", "difficulty_level", "q_type")

TRI_STATE_FIELDS = ("inCourse", "isHOTS", "isCorrect", "DPS_approved")

TRI_STATE_VALUES = {"Yes", "No", "Unmarked"}

# Selected subset of {Yes, No, Unmarked} -> condition on the field.
# Subsets missing from the table (none or all three) leave the field unconstrained.
TRI_STATE_POLICY = {
    frozenset({"Yes", "No"}): {"$in": [True, False]},
    frozenset({"Yes", "Unmarked"}): {"$ne": False},
    frozenset({"No", "Unmarked"}): {"$ne": True},
    frozenset({"Yes"}): True,
    frozenset({"No"}): False,
    frozenset({"Unmarked"}): None,
}

MODERATOR_REQUIRED = {"inCourse": True, "isCorrect": True, "DPS_approved": True}

STUDENT_REQUIRED = {"DPS_approved": True}


def split_csv(value: Optional[str]) -> List[str]:
    if not value or not str(value).strip():
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def tri_state_selection(value: Optional[str]) -> frozenset:
    return frozenset(v for v in split_csv(value) if v in TRI_STATE_VALUES)


def parse_question_number(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def build_question_query(params, student_view: bool = False) -> Dict[str, Any]:
    query: Dict[str, Any] = {}

    for attr, field in SINGLE_VALUE_FIELDS.items():
        value = getattr(params, attr, "")
        if value and str(value).strip():
            query[field] = value

    for field in MULTI_VALUE_FIELDS:
        values = split_csv(getattr(params, field, ""))
        if values:
            query[field] = {"$in": values}

    for field in TRI_STATE_FIELDS:
        selection = tri_state_selection(getattr(params, field, ""))
        if selection in TRI_STATE_POLICY:
            query[field] = copy.deepcopy(TRI_STATE_POLICY[selection])

    q_number = parse_question_number(getattr(params, "q_number", None))
    if q_number is not None:
        query["q_number"] = q_number

    if getattr(params, "moderatorView", False):
        query.update(MODERATOR_REQUIRED)

    if student_view:
        query.update(STUDENT_REQUIRED)

    logger.info(f"Built question query: {query}")
    return query
