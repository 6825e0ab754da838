"""
Expense Categories

The tracker ships with a fixed set of categories. Stored records may still
carry a category outside this set (older data, manual edits to the database),
so every lookup here is total: unknown names resolve to the "Other" style
instead of failing.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ExpenseCategory(str, Enum):
    """Supported expense categories."""
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    ENTERTAINMENT = "Entertainment"
    BILLS = "Bills"
    HEALTH = "Health"
    EDUCATION = "Education"
    OTHER = "Other"


class CategoryStyle(BaseModel):
    """Icon and color pair the presentation layer renders for a category."""
    model_config = ConfigDict(frozen=True)

    icon: str = Field(
        ...,
        description="Material icon name"
    )
    color: str = Field(
        ...,
        description="Named color"
    )


CATEGORY_STYLES: dict[ExpenseCategory, CategoryStyle] = {
    ExpenseCategory.FOOD: CategoryStyle(icon="fastfood", color="orange"),
    ExpenseCategory.TRANSPORT: CategoryStyle(icon="directions_car", color="blue"),
    ExpenseCategory.SHOPPING: CategoryStyle(icon="shopping_bag", color="purple"),
    ExpenseCategory.ENTERTAINMENT: CategoryStyle(icon="movie", color="pink"),
    ExpenseCategory.BILLS: CategoryStyle(icon="receipt_long", color="teal"),
    ExpenseCategory.HEALTH: CategoryStyle(icon="local_hospital", color="red"),
    ExpenseCategory.EDUCATION: CategoryStyle(icon="school", color="indigo"),
    ExpenseCategory.OTHER: CategoryStyle(icon="category", color="grey"),
}

FALLBACK_STYLE = CATEGORY_STYLES[ExpenseCategory.OTHER]


def category_style(name: str) -> CategoryStyle:
    """
    Resolve the display style for a category name.

    Matching is exact on the stored value. Anything that is not a known
    category gets the "Other" style.
    """
    try:
        return CATEGORY_STYLES[ExpenseCategory(name)]
    except ValueError:
        return FALLBACK_STYLE


def is_known_category(name: str) -> bool:
    """Check whether a name is one of the fixed categories."""
    return name in ExpenseCategory._value2member_map_
