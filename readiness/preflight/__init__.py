"""
Readiness Check Module

Runs ordered batteries of checks and reports their outcomes.
"""

from .models import Check, CheckStatus, Outcome, OverallStatus, Report, Section
from .checker import CheckRunner, RunListener, RunnerState
from .reporter import Reporter

__all__ = [
    "Check",
    "CheckStatus",
    "Outcome",
    "OverallStatus",
    "Report",
    "Section",
    "CheckRunner",
    "RunListener",
    "RunnerState",
    "Reporter",
]
