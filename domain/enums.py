"""
Domain enums for MacroPlan.
Contains the enumeration types used across models, schemas and services.
"""

import enum


class MealSlot(str, enum.Enum):
    """Meal-plan time categories, one meal per slot per plan"""

    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACKS = "Snacks"
    SHAKES = "Shakes"


class SplitType(str, enum.Enum):
    """How a plan's macro targets were derived"""

    BALANCED = "balanced"
    LOW_FAT = "lowFat"
    LOW_CARB = "lowCarb"
    HIGH_PROTEIN = "highProtein"
    CUSTOM = "custom"


class BmrFormula(str, enum.Enum):
    """Supported basal metabolic rate equations"""

    MIFFLIN = "mifflin"
    HARRIS = "harris"
    KATCH = "katch"


class Difficulty(str, enum.Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"
    FAST = "Fast"
    LONG = "Long"


ACTIVITY_LEVELS = (
    "Basal Metabolic Rate (BMR)",
    "Sedentary: little or no exercise",
    "Light: exercise 1-3 times/week",
    "Moderate: exercise 4-5 times/week",
    "Active: daily exercise or intense exercise 3-4 times/week",
    "Very Active: intense exercise 6-7 times/week",
    "Extra Active: very intense exercise daily, or physical job",
)

GOALS = (
    "Maintain Weight",
    "Mild weight loss of 0.25 kg per week",
    "Weight loss of 0.5 kg per week",
    "Extreme weight loss of 1 kg per week",
    "Mild weight gain of 0.25 kg per week",
    "Weight gain of 0.5 kg per week",
    "Extreme weight gain of 1 kg per week",
)
