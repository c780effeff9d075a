"""
Application services module.
"""

from investpro.services.insight import InsightService, get_insight_service

__all__ = ["InsightService", "get_insight_service"]
