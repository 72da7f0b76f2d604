"""Analysis module - trend line, text reports and charts for evaluated models.

Submodules:
    regression_line - Trend line through (actual, predicted) pairs
    report          - Fixed-layout metric text blocks
    plot            - Measured vs predicted scatter chart
"""

from carvalue.analysis.regression_line import RegressionLine, RegressionLineFitter
from carvalue.analysis.report import ReportFormatter, format_number
from carvalue.analysis.plot import RegressionPlotter

__all__ = [
    "RegressionLine",
    "RegressionLineFitter",
    "ReportFormatter",
    "format_number",
    "RegressionPlotter",
]
