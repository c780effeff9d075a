"""
IRR, NPV and Payback Calculations

IRR is found with a bracketed search: a vectorised scan of NPV across a fixed
rate domain locates the first sign change, then bisection refines it.
"""

from typing import List, Optional, Sequence
import logging
import math

import numpy as np

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 200
NPV_TOLERANCE = 1e-6
RATE_TOLERANCE = 1e-12
ZERO_TOLERANCE = 1e-12

# Search domain as decimal rates (-99% to 1000%)
IRR_LOWER_BOUND = -0.99
IRR_UPPER_BOUND = 10.0
GRID_POINTS = 2201


def calculate_npv(cash_flows: Sequence[float], discount_rate: float) -> float:
    """
    Calculate NPV (Net Present Value) of cash flows.

    The first cash flow is undiscounted (period 0).

    Args:
        cash_flows: Array of cash flows (negative = outflow, positive = inflow)
        discount_rate: Periodic discount rate (e.g., 0.10 for 10%)

    Returns:
        NPV value

    Raises:
        ValueError: If discount_rate <= -100%, where discounting is undefined
        OverflowError: If a discount factor exceeds float range
    """
    if 1 + discount_rate <= 0:
        raise ValueError("Discount rate must be greater than -100%")

    npv = 0.0
    for period, cf in enumerate(cash_flows):
        npv += cf * (1 + discount_rate) ** -period

    if not math.isfinite(npv):
        raise OverflowError("NPV exceeds float range")
    return npv


def _npv_grid(cash_flows: Sequence[float], rates: np.ndarray) -> np.ndarray:
    """Evaluate NPV at every rate in `rates`. Overflowing points come back as nan."""
    periods = np.arange(len(cash_flows))
    flows = np.asarray(cash_flows, dtype=float)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        factors = (1.0 + rates)[:, np.newaxis] ** -periods[np.newaxis, :]
        values = factors @ flows
    values[~np.isfinite(values)] = np.nan
    return values


def _npv_at(cash_flows: Sequence[float], rate: float) -> float:
    return float(_npv_grid(cash_flows, np.array([rate]))[0])


def _find_bracket(
    cash_flows: Sequence[float],
    lower: float = IRR_LOWER_BOUND,
    upper: float = IRR_UPPER_BOUND,
) -> Optional[tuple]:
    """
    Return the lowest-rate (lo, hi) pair on the search grid where NPV changes sign.

    A grid point where NPV is exactly zero is returned as a degenerate (r, r)
    bracket.
    """
    rates = np.linspace(lower, upper, GRID_POINTS)
    values = _npv_grid(cash_flows, rates)

    for i in range(len(rates) - 1):
        f_lo, f_hi = values[i], values[i + 1]
        if np.isnan(f_lo) or np.isnan(f_hi):
            continue
        if f_lo == 0.0:
            return float(rates[i]), float(rates[i])
        if (f_lo < 0) != (f_hi < 0):
            return float(rates[i]), float(rates[i + 1])

    if values[-1] == 0.0:
        return float(rates[-1]), float(rates[-1])
    return None


def calculate_irr(cash_flows: Sequence[float]) -> Optional[float]:
    """
    Calculate IRR (Internal Rate of Return) as a decimal rate.

    For cash flows with several sign changes the lowest-rate root visible on
    the search grid is returned, which is not necessarily the economically
    meaningful one.

    Args:
        cash_flows: Array of periodic cash flows

    Returns:
        IRR as decimal (e.g., 0.15 for 15%), or None when no root exists in
        [-99%, 1000%] or bisection fails to converge
    """
    flows = [float(cf) for cf in cash_flows]

    if all(abs(cf) < ZERO_TOLERANCE for cf in flows):
        # NPV is identically zero, every rate is a root
        return None

    has_positive = any(cf > 0 for cf in flows)
    has_negative = any(cf < 0 for cf in flows)
    if not has_positive or not has_negative:
        return None

    bracket = _find_bracket(flows)
    if bracket is None:
        logger.debug("IRR not bracketed in search domain")
        return None

    lo, hi = bracket
    if lo == hi:
        return lo

    f_lo = _npv_at(flows, lo)

    for _ in range(MAX_ITERATIONS):
        mid = (lo + hi) / 2
        f_mid = _npv_at(flows, mid)
        if np.isnan(f_mid):
            break

        if abs(f_mid) < NPV_TOLERANCE or (hi - lo) / 2 < RATE_TOLERANCE:
            return mid

        if (f_lo < 0) == (f_mid < 0):
            lo, f_lo = mid, f_mid
        else:
            hi = mid

    logger.debug("IRR bisection did not converge")
    return None


def calculate_payback(cumulative_cash_flows: Sequence[float]) -> Optional[float]:
    """
    Calculate the cash payback period in (fractional) years.

    Finds the first period where cumulative cash flow turns non-negative and
    interpolates linearly within that period.

    Returns:
        0.0 if the first cumulative value is already non-negative, the
        interpolated period otherwise, or None if it never pays back
    """
    for i, cumulative in enumerate(cumulative_cash_flows):
        if cumulative < 0:
            continue
        if i == 0:
            return 0.0

        previous = cumulative_cash_flows[i - 1]
        return (i - 1) + (-previous) / (cumulative - previous)

    return None


def cumulative_sum(values: Sequence[float]) -> List[float]:
    """Running total of a series."""
    return [float(v) for v in np.cumsum(np.asarray(values, dtype=float))]


def to_percent(rate: Optional[float]) -> Optional[float]:
    """Convert a decimal rate to percent, passing None through."""
    if rate is None:
        return None
    return rate * 100


def to_decimal(percent: float) -> float:
    """Convert a percent rate (e.g., 10) to decimal (0.10)."""
    return percent / 100
