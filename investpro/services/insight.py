"""
AI insight service.

Wraps an external, asynchronous insight provider that reviews an appraisal
and returns a written analysis, a recommendation and a list of risks.
Falls back to console logging if no provider is configured. Provider
failures never propagate: callers get None ("insight unavailable").
"""

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ValidationError

from investpro.calculations.appraisal import AppraisalInputs, AppraisalResults
from investpro.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

InsightProvider = Callable[[Dict[str, Any]], Awaitable[Dict[str, Any]]]


class Recommendation(str, enum.Enum):
    """Categorical recommendation returned by the provider."""

    APPROVE = "APPROVE"
    REJECT = "REJECT"
    NEUTRAL = "NEUTRAL"


class Insight(BaseModel):
    """Validated insight reply."""

    analysis: str
    recommendation: Recommendation
    risks: List[str] = []


def build_payload(
    inputs: AppraisalInputs,
    results: AppraisalResults,
    model: str = "",
) -> Dict[str, Any]:
    """Serialize inputs and results into the JSON-compatible provider payload."""
    return {
        "model": model,
        "inputs": {
            "cost_of_capital": inputs.cost_of_capital,
            "tax_rate": inputs.tax_rate,
            "inflation_rate": inputs.inflation_rate,
            "yearly_data": [
                {
                    "year": year.year,
                    "investment": year.investment,
                    "return": year.return_,
                    "write_off": year.write_off,
                }
                for year in inputs.yearly_data
            ],
        },
        "results": results.to_dict(),
    }


class InsightService:
    """Insight service with a pluggable provider."""

    def __init__(
        self,
        provider: Optional[InsightProvider] = None,
        timeout: Optional[float] = None,
        model: Optional[str] = None,
    ):
        self.provider = provider
        self.model = model if model is not None else settings.insight_model
        self.timeout = timeout if timeout is not None else settings.insight_timeout_seconds

    async def analyze(
        self,
        inputs: AppraisalInputs,
        results: AppraisalResults,
    ) -> Optional[Insight]:
        """
        Request an insight for a computed appraisal.

        Args:
            inputs: The inputs the results were computed from
            results: Appraisal results

        Returns:
            Insight if the provider replied with a valid structure, None otherwise
        """
        payload = build_payload(inputs, results, self.model)

        if not self.provider:
            logger.info(
                f"[INSIGHT - Console Mode]\n"
                f"No insight provider configured; NPV={results.npv}, "
                f"IRR={results.irr}, payback={results.cash_payback}"
            )
            return None

        try:
            reply = await asyncio.wait_for(self.provider(payload), timeout=self.timeout)
            insight = Insight.model_validate(reply)
        except asyncio.TimeoutError:
            logger.error(f"Insight provider timed out after {self.timeout}s")
            return None
        except ValidationError as e:
            logger.error(f"Insight provider returned a malformed reply: {e}")
            return None
        except Exception as e:
            logger.error(f"Error requesting insight: {str(e)}")
            return None

        logger.info(f"Insight received: {insight.recommendation.value}")
        return insight


# Singleton instance
_insight_service: Optional[InsightService] = None


def get_insight_service() -> InsightService:
    """Get the insight service singleton."""
    global _insight_service
    if _insight_service is None:
        _insight_service = InsightService()
    return _insight_service
