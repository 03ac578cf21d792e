"""
Financial Calculation Engine

Pure calculation modules for judging whether an acquisition can carry its debt.
None of these functions raise on bad input; missing or malformed figures
normalize to 0.
"""

from viability.calculations import numbers, amortization, dscr

__all__ = ["numbers", "amortization", "dscr"]
