# fitmentor/services/bmi_calculator.py
"""
BMI Category Classifier

Turns body metrics and a declared goal into the category that selects the
user's 12-week content track.
BMI = weight_kg / (height_m)²

Registration, profile updates and the BMI preview all go through classify().
"""
import math
from typing import NamedTuple

LOSE_WEIGHT = "lose_weight"
GAIN_WEIGHT = "gain_weight"
STAY_FIT = "stay_fit"

CATEGORIES = (LOSE_WEIGHT, GAIN_WEIGHT, STAY_FIT)
GOALS = ("Lose Weight", "Gain Weight", "Stay Fit")

OVERWEIGHT_BMI = 25
UNDERWEIGHT_BMI = 18.5


class CategoryResult(NamedTuple):
    bmi: float
    category: str
    is_goal_mismatched: bool


def normalize_goal(goal: str) -> str:
    """Map a declared goal to its naive category ("Stay Fit" -> "stay_fit").

    Only the first space is replaced.
    """
    return goal.lower().replace(" ", "_", 1)


def describe_category(category: str) -> str:
    """Display label for a category ("lose_weight" -> "lose weight")."""
    return category.replace("_", " ", 1)


def _round_bmi(bmi: float) -> float:
    # Half-up to one decimal; non-finite values pass through untouched
    if not math.isfinite(bmi):
        return bmi
    return math.floor(bmi * 10 + 0.5) / 10


def calculate_bmi(weight_kg: float, height_cm: float) -> float:
    """Unrounded BMI from weight (kg) and height (cm)."""
    height_m = height_cm / 100
    try:
        return weight_kg / (height_m * height_m)
    except ZeroDivisionError:
        # Callers validate positive inputs; zero height is undefined, not an error
        if weight_kg == 0 or math.isnan(weight_kg):
            return math.nan
        return math.copysign(math.inf, weight_kg)


def classify(weight: float, height: float, goal: str) -> CategoryResult:
    """
    Resolve the fitness category for a weight/height/goal triple.

    The declared goal gives a baseline category; BMI thresholds override it:
    above 25 forces lose_weight, below 18.5 forces gain_weight and the
    inclusive 18.5-25 band forces stay_fit. Thresholds use the unrounded BMI,
    so 25.0 and 18.5 both land in the stay_fit band.

    Args:
        weight: Weight in kilograms (positive, validated by the caller)
        height: Height in centimeters (positive, validated by the caller)
        goal: "Lose Weight", "Gain Weight" or "Stay Fit"

    Returns:
        CategoryResult with BMI rounded to one decimal place

    Examples:
        >>> classify(70, 175, "Stay Fit")
        CategoryResult(bmi=22.9, category='stay_fit', is_goal_mismatched=False)
        >>> classify(90, 170, "Stay Fit")
        CategoryResult(bmi=31.1, category='lose_weight', is_goal_mismatched=True)
    """
    bmi = calculate_bmi(weight, height)
    baseline = normalize_goal(goal)

    category = baseline
    if bmi > OVERWEIGHT_BMI and category != LOSE_WEIGHT:
        category = LOSE_WEIGHT
    elif bmi < UNDERWEIGHT_BMI and category != GAIN_WEIGHT:
        category = GAIN_WEIGHT
    elif UNDERWEIGHT_BMI <= bmi <= OVERWEIGHT_BMI and category != STAY_FIT:
        category = STAY_FIT

    return CategoryResult(
        bmi=_round_bmi(bmi),
        category=category,
        is_goal_mismatched=category != baseline,
    )
