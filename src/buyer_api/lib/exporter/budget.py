"""Budget range checks and lakh-denominated display strings."""

from dataclasses import dataclass

_LAKH = 100_000


@dataclass(frozen=True)
class BudgetCheck:
    is_valid: bool
    error: str | None = None
    formatted: str | None = None


def _lakhs(amount: int) -> str:
    return f"₹{amount / _LAKH:.1f}L"


def format_budget(budget_min: int | None, budget_max: int | None) -> str:
    """Render a budget range, e.g. ``₹50.0L - ₹60.0L`` or ``Up to ₹60.0L``."""
    if not budget_min and not budget_max:
        return "Not specified"
    if budget_min and budget_max:
        return f"{_lakhs(budget_min)} - {_lakhs(budget_max)}"
    if budget_max:
        return f"Up to {_lakhs(budget_max)}"
    return f"From {_lakhs(budget_min or 0)}"


def validate_budget(budget_min: int | None, budget_max: int | None) -> BudgetCheck:
    """Check a budget range and return its display string when valid."""
    if budget_min is not None and budget_min < 0:
        return BudgetCheck(False, "Budget minimum must be a positive integer")
    if budget_max is not None and budget_max < 0:
        return BudgetCheck(False, "Budget maximum must be a positive integer")
    if budget_min is not None and budget_max is not None and budget_min > budget_max:
        return BudgetCheck(False, "Budget minimum cannot be greater than maximum")
    return BudgetCheck(True, formatted=format_budget(budget_min, budget_max))
