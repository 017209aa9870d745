"""
readiness - development environment readiness checks.

Detects toolchains and libraries, compares versions against minimums,
provisions missing system dependencies and reports what is left to fix.
"""

__version__ = "1.0.0"
