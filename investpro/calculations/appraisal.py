"""
Investment Appraisal Engine

Builds net income and cash flow series from a yearly schedule and derives
NPV, IRR and cash payback. All functions here are pure.
"""

from dataclasses import dataclass, field, replace, asdict
from functools import lru_cache
from typing import List, Optional, Tuple, Dict, Any
import logging

from investpro.calculations.irr import (
    calculate_npv,
    calculate_irr,
    calculate_payback,
    cumulative_sum,
    to_decimal,
    to_percent,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class YearlyData:
    """A single project year. `year` is a display label only."""

    year: int
    investment: float = 0.0  # Capital expenditure (outflow)
    return_: float = 0.0  # Revenue (inflow)
    write_off: float = 0.0  # Non-cash depreciation deduction


@dataclass(frozen=True)
class AppraisalInputs:
    """
    Global economic parameters plus the ordered yearly schedule.

    Rates are in percent (10 means 10%). `inflation_rate` is carried through
    but does not enter any of the calculations.
    """

    cost_of_capital: float
    tax_rate: float
    inflation_rate: float
    yearly_data: Tuple[YearlyData, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Store as a tuple so inputs stay hashable
        object.__setattr__(self, "yearly_data", tuple(self.yearly_data))

    def add_year(self) -> "AppraisalInputs":
        """Append an empty year labelled with the current number of years."""
        new_year = YearlyData(year=len(self.yearly_data))
        return replace(self, yearly_data=self.yearly_data + (new_year,))

    def remove_year(self, index: int) -> "AppraisalInputs":
        """
        Drop the year at position `index`.

        The last remaining year is never removed. An index that matches no
        position (negative or past the end) leaves the schedule unchanged.
        """
        if len(self.yearly_data) <= 1:
            return self
        data = tuple(y for i, y in enumerate(self.yearly_data) if i != index)
        return replace(self, yearly_data=data)

    def update_year(self, index: int, **changes) -> "AppraisalInputs":
        """Replace fields of the year at `index`."""
        data = list(self.yearly_data)
        data[index] = replace(data[index], **changes)
        return replace(self, yearly_data=tuple(data))


@dataclass(frozen=True)
class AppraisalResults:
    """Derived series and metrics. irr is in percent, cash_payback in years."""

    irr: Optional[float]
    cash_payback: Optional[float]
    npv: Optional[float]
    total_net_income: float
    total_cash_flow: float
    cash_flows: Tuple[float, ...]
    net_incomes: Tuple[float, ...]
    cumulative_cash_flows: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("cash_flows", "net_incomes", "cumulative_cash_flows"):
            data[key] = list(data[key])
        return data


def calculate_net_income(year: YearlyData, tax_rate: float) -> float:
    """
    Calculate after-tax net income for a year.

    Taxable income is revenue less the write-off.

    Args:
        year: Yearly schedule entry
        tax_rate: Tax rate in percent

    Returns:
        (return - write_off) * (1 - tax_rate / 100)
    """
    return (year.return_ - year.write_off) * (1 - to_decimal(tax_rate))


def calculate_cash_flow(year: YearlyData, net_income: float) -> float:
    """Add back the non-cash write-off and subtract the year's investment."""
    return net_income + year.write_off - year.investment


def build_series(inputs: AppraisalInputs) -> Tuple[List[float], List[float], List[float]]:
    """
    Build the per-year series in schedule order.

    Returns:
        (net_incomes, cash_flows, cumulative_cash_flows)
    """
    net_incomes = []
    cash_flows = []

    for year in inputs.yearly_data:
        net_income = calculate_net_income(year, inputs.tax_rate)
        net_incomes.append(net_income)
        cash_flows.append(calculate_cash_flow(year, net_income))

    return net_incomes, cash_flows, cumulative_sum(cash_flows)


def run_appraisal(inputs: AppraisalInputs) -> AppraisalResults:
    """
    Run the full appraisal for a set of inputs.

    NPV discounts by position in the schedule, not by the year label.
    Undefined metrics are returned as None: IRR with no root in the search
    domain, payback that never happens, and NPV when cost of capital is
    -100% or lower.

    The per-year series are finite for inputs of ordinary magnitude. Amounts
    near the float limit (around 1e308) can overflow to inf in the series
    and totals.
    """
    net_incomes, cash_flows, cumulative = build_series(inputs)

    try:
        npv = calculate_npv(cash_flows, to_decimal(inputs.cost_of_capital))
    except (ValueError, OverflowError) as e:
        logger.debug(f"NPV undefined: {e}")
        npv = None

    return AppraisalResults(
        irr=to_percent(calculate_irr(cash_flows)),
        cash_payback=calculate_payback(cumulative),
        npv=npv,
        total_net_income=sum(net_incomes),
        total_cash_flow=sum(cash_flows),
        cash_flows=tuple(cash_flows),
        net_incomes=tuple(net_incomes),
        cumulative_cash_flows=tuple(cumulative),
    )


@lru_cache(maxsize=256)
def run_appraisal_cached(inputs: AppraisalInputs) -> AppraisalResults:
    """Memoized run_appraisal, keyed on input equality."""
    return run_appraisal(inputs)


def default_inputs() -> AppraisalInputs:
    """The base case a new appraisal starts from."""
    return AppraisalInputs(
        cost_of_capital=10,
        tax_rate=25,
        inflation_rate=2,
        yearly_data=(
            YearlyData(year=0, investment=100000, return_=0, write_off=0),
            YearlyData(year=1, investment=0, return_=40000, write_off=20000),
            YearlyData(year=2, investment=0, return_=45000, write_off=20000),
            YearlyData(year=3, investment=0, return_=50000, write_off=20000),
            YearlyData(year=4, investment=0, return_=55000, write_off=20000),
            YearlyData(year=5, investment=0, return_=60000, write_off=20000),
        ),
    )
