"""
InvestPro Appraisal - investment appraisal engine and calculation API.
"""
