# Italian school grades (1-10) from a percentage score.

from __future__ import annotations

GRADE_THRESHOLDS = [
    (95, "10 eccellente"),
    (85, "9 distinto"),
    (75, "8 buono"),
    (65, "7 discreto"),
    (55, "6 sufficiente"),
    (45, "5 insufficiente"),
    (35, "4 gravemente insufficiente"),
    (25, "3 molto gravemente insufficiente"),
]
LOWEST_GRADE = "1-2 gravemente insufficiente"


def calculate_grade(percentage: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if percentage >= threshold:
            return grade
    return LOWEST_GRADE

