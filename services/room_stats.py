# services/room_stats.py
from typing import Dict, List

SUCCESS_RATE_BUCKETS = [
    ("excellent", 90),
    ("good", 75),
    ("average", 60),
    ("belowAverage", 40),
]


def student_question_stats(student: dict) -> Dict[str, int]:
    tracking = list((student.get("question_tracking") or {}).values())
    return {
        "totalQuestions": len(tracking),
        "successQuestions": sum(1 for t in tracking if t.get("status") == "success"),
        "failedQuestions": sum(1 for t in tracking if t.get("status") == "failed"),
        "unsureQuestions": sum(1 for t in tracking if t.get("status") == "unsure"),
    }


def success_rate_bucket(rate: float) -> str:
    for name, threshold in SUCCESS_RATE_BUCKETS:
        if rate >= threshold:
            return name
    return "poor"


def question_set_performance(question_set: dict, students: List[dict]) -> dict:
    set_id = str(question_set["_id"])
    completions = [
        s["question_sets_tracking"][set_id]
        for s in students
        if (s.get("question_sets_tracking") or {}).get(set_id)
    ]
    distribution = {name: 0 for name, _ in SUCCESS_RATE_BUCKETS}
    distribution["poor"] = 0
    stats = {
        "_id": set_id,
        "label": question_set.get("label"),
        "totalStudents": len(students),
        "studentsCompleted": len(completions),
        "avgSuccessRate": 0,
        "avgCompletionTime": 0,
        "avgResults": {"success": 0, "failed": 0, "unsure": 0},
        "questionCount": len(question_set.get("questions") or []),
        "successRateDistribution": distribution,
    }
    if not completions:
        return stats

    count = len(completions)
    stats["avgSuccessRate"] = sum(c.get("successRate") or 0 for c in completions) / count
    stats["avgCompletionTime"] = sum(c.get("sessionDuration") or 0 for c in completions) / count
    for outcome in stats["avgResults"]:
        stats["avgResults"][outcome] = sum((c.get("results") or {}).get(outcome) or 0 for c in completions) / count
    for completion in completions:
        distribution[success_rate_bucket(completion.get("successRate") or 0)] += 1
    return stats
