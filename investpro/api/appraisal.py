"""
Appraisal API endpoints.

These endpoints accept appraisal inputs and return calculated results.
Every request is computed from scratch; nothing is stored.
"""

import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from investpro.calculations import irr
from investpro.calculations.appraisal import (
    AppraisalInputs,
    AppraisalResults,
    YearlyData,
    default_inputs,
    run_appraisal_cached,
)
from investpro.calculations.sensitivity import (
    SENSITIVITY_OPTIONS,
    apply_sensitivity,
    sensitivity_matrix,
)
from investpro.services.insight import Insight, InsightService, get_insight_service

logger = logging.getLogger(__name__)

router = APIRouter()

SensitivityLevel = Literal[-20, -15, -10, -5, 0, 5, 10, 15, 20]


class YearlyDataInput(BaseModel):
    """One year of the schedule. `return` is accepted as the JSON key."""

    model_config = ConfigDict(populate_by_name=True)

    year: int
    investment: float = Field(0.0, ge=0)
    return_: float = Field(0.0, alias="return")
    write_off: float = 0.0


class AppraisalInput(BaseModel):
    """Input for an appraisal."""

    cost_of_capital: float = 10.0
    tax_rate: float = 25.0
    inflation_rate: float = 2.0
    yearly_data: List[YearlyDataInput] = Field(..., min_length=1)

    # Sensitivity (applied to the base schedule before calculating)
    return_sensitivity: SensitivityLevel = 0
    investment_sensitivity: SensitivityLevel = 0

    def to_inputs(self) -> AppraisalInputs:
        """Convert to the engine's immutable inputs (sensitivity not applied)."""
        return AppraisalInputs(
            cost_of_capital=self.cost_of_capital,
            tax_rate=self.tax_rate,
            inflation_rate=self.inflation_rate,
            yearly_data=tuple(
                YearlyData(
                    year=y.year,
                    investment=y.investment,
                    return_=y.return_,
                    write_off=y.write_off,
                )
                for y in self.yearly_data
            ),
        )


class YearlyDataOutput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    year: int
    investment: float
    return_: float = Field(alias="return")
    write_off: float


class InputsOutput(BaseModel):
    cost_of_capital: float
    tax_rate: float
    inflation_rate: float
    yearly_data: List[YearlyDataOutput]


class ResultsOutput(BaseModel):
    """Calculated appraisal metrics and series."""

    irr: Optional[float] = None
    cash_payback: Optional[float] = None
    npv: Optional[float] = None
    total_net_income: float
    total_cash_flow: float
    cash_flows: List[float]
    net_incomes: List[float]
    cumulative_cash_flows: List[float]


class AppraisalResponse(BaseModel):
    """Response with the active (sensitivity-adjusted) inputs and results."""

    inputs: InputsOutput
    results: ResultsOutput


class SensitivityOption(BaseModel):
    label: str
    value: int
    kind: str


class DefaultsResponse(BaseModel):
    inputs: InputsOutput
    sensitivity_options: List[SensitivityOption]


def _inputs_output(inputs: AppraisalInputs) -> InputsOutput:
    return InputsOutput(
        cost_of_capital=inputs.cost_of_capital,
        tax_rate=inputs.tax_rate,
        inflation_rate=inputs.inflation_rate,
        yearly_data=[
            YearlyDataOutput(
                year=y.year,
                investment=y.investment,
                return_=y.return_,
                write_off=y.write_off,
            )
            for y in inputs.yearly_data
        ],
    )


def _results_output(results: AppraisalResults) -> ResultsOutput:
    return ResultsOutput(**results.to_dict())


def _active_inputs(body: AppraisalInput) -> AppraisalInputs:
    return apply_sensitivity(
        body.to_inputs(),
        body.return_sensitivity,
        body.investment_sensitivity,
    )


@router.get("/defaults", response_model=DefaultsResponse)
async def get_defaults():
    """Return the default base case and the available sensitivity levels."""
    return DefaultsResponse(
        inputs=_inputs_output(default_inputs()),
        sensitivity_options=[
            SensitivityOption(label=o.label, value=o.value, kind=o.kind)
            for o in SENSITIVITY_OPTIONS
        ],
    )


@router.post("", response_model=AppraisalResponse)
async def calculate_appraisal(body: AppraisalInput):
    """Calculate NPV, IRR, payback and the yearly series."""
    inputs = _active_inputs(body)
    results = run_appraisal_cached(inputs)

    return AppraisalResponse(
        inputs=_inputs_output(inputs),
        results=_results_output(results),
    )


class SensitivityRow(BaseModel):
    return_sensitivity: int
    investment_sensitivity: int
    npv: Optional[float] = None
    irr: Optional[float] = None
    cash_payback: Optional[float] = None


class SensitivityResponse(BaseModel):
    rows: List[SensitivityRow]


@router.post("/sensitivity", response_model=SensitivityResponse)
async def calculate_sensitivity(body: AppraisalInput):
    """Appraise every pair of sensitivity levels against the posted base case."""
    rows = sensitivity_matrix(body.to_inputs())
    return SensitivityResponse(rows=[SensitivityRow(**row) for row in rows])


class IRRInput(BaseModel):
    """Input for a raw cash flow calculation."""

    cash_flows: List[float] = Field(..., min_length=1)
    discount_rate: float = 10.0  # Percent


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: Optional[float] = None
    npv: float
    cash_payback: Optional[float] = None
    total_cash_flow: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate IRR, NPV and payback for an arbitrary cash flow series."""
    try:
        npv = irr.calculate_npv(inputs.cash_flows, irr.to_decimal(inputs.discount_rate))
    except (ValueError, OverflowError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return IRRResponse(
        irr=irr.to_percent(irr.calculate_irr(inputs.cash_flows)),
        npv=npv,
        cash_payback=irr.calculate_payback(irr.cumulative_sum(inputs.cash_flows)),
        total_cash_flow=sum(inputs.cash_flows),
    )


class InsightResponse(BaseModel):
    """Insight for an appraisal. `available` is False when the provider failed."""

    available: bool
    insight: Optional[Insight] = None
    results: ResultsOutput


@router.post("/insight", response_model=InsightResponse)
async def request_insight(
    body: AppraisalInput,
    service: InsightService = Depends(get_insight_service),
):
    """Calculate the appraisal and ask the insight provider to review it."""
    inputs = _active_inputs(body)
    results = run_appraisal_cached(inputs)

    insight = await service.analyze(inputs, results)
    if insight is None:
        logger.info("Insight unavailable")

    return InsightResponse(
        available=insight is not None,
        insight=insight,
        results=_results_output(results),
    )
