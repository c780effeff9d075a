"""
Appraisal Calculation Engine

Core calculation modules for investment appraisal: yearly series, NPV,
IRR, cash payback and sensitivity adjustments.
"""

from investpro.calculations import irr, appraisal, sensitivity

__all__ = ["irr", "appraisal", "sensitivity"]
