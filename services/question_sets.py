# services/question_sets.py
from typing import Dict, List, Optional, Sequence, Tuple

# (section, q_type, slots) in paper order
DPS_LAYOUT: List[Tuple[str, str, int]] = [
    ("A", "MCQ", 18),
    ("A", "A-R", 2),
    ("B", "VSA", 5),
    ("C", "SA", 6),
    ("D", "LA", 4),
    ("E", "Case-Study", 3),
]


class QuestionSetLayoutError(ValueError):
    pass


def arrange_dps_sections(questions: Sequence[dict]) -> Dict[Tuple[str, str], List[dict]]:
    """Fill each section slot with questions of its type, keeping selection order."""
    slots = {(section, q_type): [] for section, q_type, _ in DPS_LAYOUT}
    capacity = {q_type: (section, count) for section, q_type, count in DPS_LAYOUT}
    for question in questions:
        q_type = question.get("q_type") or ""
        if q_type not in capacity:
            continue
        section, count = capacity[q_type]
        if len(slots[(section, q_type)]) < count:
            slots[(section, q_type)].append(question)
    return slots


def missing_dps_slot(slots: Dict[Tuple[str, str], List[dict]]) -> Optional[str]:
    for section, q_type, count in DPS_LAYOUT:
        have = len(slots[(section, q_type)])
        if have < count:
            return f"Need {count - have} more {q_type} questions for Section {section}"
    return None


def order_dps_question_ids(questions: Sequence[dict]) -> List[str]:
    slots = arrange_dps_sections(questions)
    problem = missing_dps_slot(slots)
    if problem:
        raise QuestionSetLayoutError(problem)
    return [
        str(question["_id"])
        for section, q_type, _ in DPS_LAYOUT
        for question in slots[(section, q_type)]
    ]
