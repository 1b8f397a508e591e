# marketsim/grading.py
# Final performance report: normalized stats -> weighted score -> letter grade.

from typing import Any, Dict, Mapping

# (threshold, grade), checked top-down
GRADE_BANDS = [
    (0.9, "A"),
    (0.8, "A-"),
    (0.7, "B+"),
    (0.6, "B"),
    (0.5, "C"),
]


def _num(stats: Mapping[str, Any], key: str) -> float:
    try:
        return float(stats.get(key) or 0)
    except (TypeError, ValueError):
        return 0.0


def weighted_score(stats: Mapping[str, Any]) -> float:
    cash = min(1.0, _num(stats, "cash") / 1000)  # 1000 or more -> 1.0
    loyalty = min(1.0, _num(stats, "loyalty") / 100)
    market = min(1.0, _num(stats, "marketShare") / 100)
    return cash * 0.4 + loyalty * 0.3 + market * 0.3


def compute_overall_grade(stats: Mapping[str, Any]) -> str:
    score = weighted_score(stats or {})
    for threshold, grade in GRADE_BANDS:
        if score >= threshold:
            return grade
    return "D"


def build_report(stats: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "cash": stats.get("cash"),
        "loyalty": stats.get("loyalty"),
        "marketShare": stats.get("marketShare"),
        "overallGrade": compute_overall_grade(stats),
    }
