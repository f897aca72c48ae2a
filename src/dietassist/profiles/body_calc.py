"""Calorie target calculator.

Calculates BMR (Basal Metabolic Rate) with either the Harris-Benedict or
the Mifflin-St Jeor equation, then scales it by an activity multiplier to
get the daily calorie target (TDEE, Total Daily Energy Expenditure).

All inputs are metric: weight in kg, height in cm, age in years.
"""

from __future__ import annotations

from enum import Enum


class Gender(Enum):
    """Gender for BMR calculation. OTHER uses the female coefficients."""
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(Enum):
    """Activity level multipliers for TDEE calculation."""
    SEDENTARY = "sedentary"                  # Little or no exercise
    LIGHTLY_ACTIVE = "lightly_active"        # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"  # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"              # Hard exercise 6-7 days/week
    EXTREMELY_ACTIVE = "extremely_active"    # Very hard exercise, physical job


class CalorieCalculationMethod(Enum):
    """BMR equation."""
    HARRIS_BENEDICT = "harris_benedict"
    MIFFLIN_ST_JEOR = "mifflin_st_jeor"


ACTIVITY_MULTIPLIERS = {
    ActivityLevel.SEDENTARY: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE: 1.375,
    ActivityLevel.MODERATELY_ACTIVE: 1.55,
    ActivityLevel.VERY_ACTIVE: 1.725,
    ActivityLevel.EXTREMELY_ACTIVE: 1.9,
}

ACTIVITY_LABELS = {
    ActivityLevel.SEDENTARY: "Sedentary",
    ActivityLevel.LIGHTLY_ACTIVE: "Lightly Active",
    ActivityLevel.MODERATELY_ACTIVE: "Moderately Active",
    ActivityLevel.VERY_ACTIVE: "Very Active",
    ActivityLevel.EXTREMELY_ACTIVE: "Extremely Active",
}

METHOD_LABELS = {
    CalorieCalculationMethod.HARRIS_BENEDICT: "Harris-Benedict",
    CalorieCalculationMethod.MIFFLIN_ST_JEOR: "Mifflin-St Jeor",
}


def calculate_bmr_harris_benedict(
    gender: Gender,
    weight_kg: float,
    height_cm: float,
    age: int,
) -> float:
    """Calculate BMR using the revised Harris-Benedict equation.

    Args:
        gender: Gender (MALE uses male coefficients, others female)
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years

    Returns:
        BMR in calories per day
    """
    if gender == Gender.MALE:
        return 66.5 + (13.75 * weight_kg) + (5.003 * height_cm) - (6.75 * age)
    return 655.1 + (9.563 * weight_kg) + (1.850 * height_cm) - (4.676 * age)


def calculate_bmr_mifflin_st_jeor(
    gender: Gender,
    weight_kg: float,
    height_cm: float,
    age: int,
) -> float:
    """Calculate BMR using the Mifflin-St Jeor equation.

    Args:
        gender: Gender (MALE uses +5, others -161)
        weight_kg: Weight in kilograms
        height_cm: Height in centimeters
        age: Age in years

    Returns:
        BMR in calories per day
    """
    bmr = (10 * weight_kg) + (6.25 * height_cm) - (5 * age)
    if gender == Gender.MALE:
        return bmr + 5
    return bmr - 161


def calculate_bmr(
    method: CalorieCalculationMethod,
    gender: Gender,
    weight_kg: float,
    height_cm: float,
    age: int,
) -> float:
    """Calculate BMR with the chosen equation."""
    if method == CalorieCalculationMethod.HARRIS_BENEDICT:
        return calculate_bmr_harris_benedict(gender, weight_kg, height_cm, age)
    return calculate_bmr_mifflin_st_jeor(gender, weight_kg, height_cm, age)


def calculate_tdee(bmr: float, activity_level: ActivityLevel) -> float:
    """Calculate Total Daily Energy Expenditure.

    Args:
        bmr: Basal Metabolic Rate
        activity_level: Activity level

    Returns:
        TDEE in calories per day
    """
    return bmr * ACTIVITY_MULTIPLIERS[activity_level]
