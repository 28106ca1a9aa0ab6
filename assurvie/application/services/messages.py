"""Helpers shared by the advisory messages of the engines."""

from __future__ import annotations


def eur(amount: float) -> str:
    """Amount rounded to the euro with French thousands separators."""
    return f"{amount:,.0f}".replace(",", " ") + " €"
