"""Service module exports."""

from . import debts, financial

__all__ = ["debts", "financial"]
