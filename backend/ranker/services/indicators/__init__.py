"""
Indicator Calculations

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
"""

from ranker.services.indicators.calculations import indicator_snapshot

__all__ = ["indicator_snapshot"]
