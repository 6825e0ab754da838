"""
Add-Form Validation

The store accepts whatever it is given, so the add form is the only place
where expenses are checked. The rules are the ones the form always enforced:

- the title must not be empty once whitespace is trimmed
- the amount must parse as a number greater than zero
- the category must be one of the fixed categories

Validation never fixes input silently. It reports issues for the
presentation layer to show.
"""

import math
from datetime import datetime
from typing import Optional, Union

from expense_tracker.models.category import ExpenseCategory, is_known_category
from expense_tracker.models.expense import ExpenseDraft, ValidationIssue


TITLE_REQUIRED_MESSAGE = "Please enter a title"
INVALID_AMOUNT_MESSAGE = "Please enter a valid amount"
INVALID_CATEGORY_MESSAGE = "Please choose a category"


class ExpenseFormValidator:
    """
    Turns raw add-form input into an ExpenseDraft.
    """

    def __init__(self, default_category: ExpenseCategory = ExpenseCategory.FOOD):
        self._default_category = default_category

    def _parse_amount(self, amount_text: str) -> Optional[float]:
        """Parse the amount field, or None if it is not a usable number."""
        try:
            amount = float(amount_text.strip())
        except (AttributeError, ValueError):
            return None
        if not math.isfinite(amount):
            return None
        return amount

    def validate(
        self,
        title: str,
        amount_text: str,
        date: Optional[datetime] = None,
        category: Union[ExpenseCategory, str, None] = None,
    ) -> tuple[Optional[ExpenseDraft], list[ValidationIssue]]:
        """
        Validate the add form.

        Args:
            title: Title as typed
            amount_text: Amount as typed
            date: Picked date, defaults to now
            category: Picked category, defaults to the configured default

        Returns:
            (draft, issues). `draft` is None whenever `issues` is non-empty.
        """
        issues = []

        title = (title or "").strip()
        if not title:
            issues.append(ValidationIssue(
                field="title",
                message=TITLE_REQUIRED_MESSAGE,
            ))

        amount = self._parse_amount(amount_text)
        if amount is None or amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                message=INVALID_AMOUNT_MESSAGE,
            ))

        if category is None:
            category = self._default_category
        elif isinstance(category, str) and not is_known_category(category):
            issues.append(ValidationIssue(
                field="category",
                message=INVALID_CATEGORY_MESSAGE,
            ))

        if issues:
            return None, issues

        draft = ExpenseDraft(
            title=title,
            amount=amount,
            date=date or datetime.now(),
            category=ExpenseCategory(category),
        )
        return draft, []

    def get_user_friendly_summary(self, issues: list[ValidationIssue]) -> str:
        """The notice to show for a rejected form: the first issue found."""
        if not issues:
            return ""
        return issues[0].message
