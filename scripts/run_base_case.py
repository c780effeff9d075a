"""
Print the appraisal of the default base case and its sensitivity matrix.
"""
import argparse
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from investpro.calculations.appraisal import default_inputs, run_appraisal
from investpro.calculations.sensitivity import (
    SENSITIVITY_LEVELS,
    apply_sensitivity,
    sensitivity_matrix,
)


def _fmt(value, suffix=""):
    if value is None:
        return "N/A"
    return f"{value:,.2f}{suffix}"


def main(argv=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--return-sensitivity", type=int, default=0, choices=SENSITIVITY_LEVELS)
    parser.add_argument("--investment-sensitivity", type=int, default=0, choices=SENSITIVITY_LEVELS)
    parser.add_argument("--matrix", action="store_true", help="Also print the NPV sensitivity matrix")
    args = parser.parse_args(argv)

    base = default_inputs()
    inputs = apply_sensitivity(base, args.return_sensitivity, args.investment_sensitivity)
    results = run_appraisal(inputs)

    print(f"Cost of capital: {inputs.cost_of_capital}%  Tax rate: {inputs.tax_rate}%")
    print(f"{'Year':>4} {'Net income':>14} {'Cash flow':>14} {'Cumulative':>14}")
    for year, ni, cf, cum in zip(
        inputs.yearly_data,
        results.net_incomes,
        results.cash_flows,
        results.cumulative_cash_flows,
    ):
        print(f"{year.year:>4} {ni:>14,.2f} {cf:>14,.2f} {cum:>14,.2f}")

    print()
    print(f"NPV:          {_fmt(results.npv)}")
    print(f"IRR:          {_fmt(results.irr, '%')}")
    print(f"Cash payback: {_fmt(results.cash_payback, ' yrs')}")

    if args.matrix:
        print()
        print("NPV by return (rows) / investment (columns) sensitivity")
        print("      " + "".join(f"{level:>12}" for level in SENSITIVITY_LEVELS))
        rows = sensitivity_matrix(base)
        for i, return_level in enumerate(SENSITIVITY_LEVELS):
            row = rows[i * len(SENSITIVITY_LEVELS):(i + 1) * len(SENSITIVITY_LEVELS)]
            print(f"{return_level:>6}" + "".join(f"{_fmt(r['npv']):>12}" for r in row))


if __name__ == "__main__":
    main()
