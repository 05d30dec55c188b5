"""
Game Ledger - Game session and transaction tracking service.

Records per-user monetary transactions against bounded games, keeps at
most one game active at a time, and reports totals per user and per day.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
