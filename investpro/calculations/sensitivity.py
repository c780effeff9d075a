"""
Sensitivity Adjustments

Stress a base set of inputs by scaling revenue and investment across all
years. The two knobs use opposite sign conventions:

    adjusted_return     = base_return     * (1 + return_sensitivity / 100)
    adjusted_investment = base_investment * (1 - investment_sensitivity / 100)

so a positive investment sensitivity is a cost saving. For example, a base
investment of 100,000 at +10 becomes 90,000, while a base return of 40,000
at +10 becomes 44,000.
"""

from dataclasses import dataclass, replace
from typing import List, Sequence, Dict, Any

from investpro.calculations.appraisal import AppraisalInputs, run_appraisal

SENSITIVITY_LEVELS = (-20, -15, -10, -5, 0, 5, 10, 15, 20)


@dataclass(frozen=True)
class SensitivityScenario:
    """A selectable sensitivity level."""

    label: str
    value: int
    kind: str  # 'lower', 'base' or 'boost'


def _scenario_for(level: int) -> SensitivityScenario:
    if level == 0:
        return SensitivityScenario(label="Base Case", value=0, kind="base")
    if level < 0:
        return SensitivityScenario(label=f"{-level}% Lower", value=level, kind="lower")
    return SensitivityScenario(label=f"{level}% Boost", value=level, kind="boost")


SENSITIVITY_OPTIONS = tuple(_scenario_for(level) for level in SENSITIVITY_LEVELS)


def validate_level(level: int) -> int:
    """Raise ValueError unless `level` is one of the allowed sensitivity levels."""
    if level not in SENSITIVITY_LEVELS:
        raise ValueError(
            f"Sensitivity must be one of {list(SENSITIVITY_LEVELS)}, got {level}"
        )
    return level


def return_factor(return_sensitivity: int) -> float:
    return 1 + validate_level(return_sensitivity) / 100


def investment_factor(investment_sensitivity: int) -> float:
    # Positive sensitivity lowers the investment
    return 1 - validate_level(investment_sensitivity) / 100


def apply_sensitivity(
    base: AppraisalInputs,
    return_sensitivity: int = 0,
    investment_sensitivity: int = 0,
) -> AppraisalInputs:
    """
    Build the active inputs from a base case and two sensitivity levels.

    Write-offs and the global rates are left unchanged.

    Args:
        base: Base inputs as entered
        return_sensitivity: Percent adjustment to every year's return
        investment_sensitivity: Percent reduction of every year's investment

    Returns:
        New AppraisalInputs; `base` is not modified

    Raises:
        ValueError: If either level is not an allowed sensitivity level
    """
    r_factor = return_factor(return_sensitivity)
    i_factor = investment_factor(investment_sensitivity)

    yearly_data = tuple(
        replace(
            year,
            return_=year.return_ * r_factor,
            investment=year.investment * i_factor,
        )
        for year in base.yearly_data
    )
    return replace(base, yearly_data=yearly_data)


def sensitivity_matrix(
    base: AppraisalInputs,
    levels: Sequence[int] = SENSITIVITY_LEVELS,
) -> List[Dict[str, Any]]:
    """
    Appraise every (return, investment) sensitivity pair.

    Returns:
        One row per pair, ordered by return level then investment level
    """
    rows = []
    for return_level in levels:
        for investment_level in levels:
            results = run_appraisal(
                apply_sensitivity(base, return_level, investment_level)
            )
            rows.append({
                "return_sensitivity": return_level,
                "investment_sensitivity": investment_level,
                "npv": results.npv,
                "irr": results.irr,
                "cash_payback": results.cash_payback,
            })
    return rows
