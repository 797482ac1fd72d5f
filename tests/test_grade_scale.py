import pytest

from grade_scale import calculate_grade


def grade_numeral(grade):
    # "1-2 gravemente insufficiente" counts as 1
    return int(grade.split(" ", 1)[0].split("-", 1)[0])


@pytest.mark.parametrize(
    "pct,grade",
    [
        (100, "10 eccellente"),
        (95, "10 eccellente"),
        (94.9, "9 distinto"),
        (85, "9 distinto"),
        (75, "8 buono"),
        (74.99, "7 discreto"),
        (65, "7 discreto"),
        (55, "6 sufficiente"),
        (45, "5 insufficiente"),
        (35, "4 gravemente insufficiente"),
        (25, "3 molto gravemente insufficiente"),
        (24.9, "1-2 gravemente insufficiente"),
        (0, "1-2 gravemente insufficiente"),
    ],
)
def test_thresholds(pct, grade):
    assert calculate_grade(pct) == grade


def test_out_of_range_is_not_validated():
    assert calculate_grade(140) == "10 eccellente"
    assert calculate_grade(-5) == "1-2 gravemente insufficiente"


def test_monotonic_over_full_range():
    numerals = [grade_numeral(calculate_grade(p / 10)) for p in range(0, 1001)]
    assert numerals == sorted(numerals)
    assert numerals[0] == 1 and numerals[-1] == 10
