"""
fin_eval/formatting.py
======================
Fixed-precision number formatting, field labels, and traffic-light
colour helpers for indicator display.
"""
from __future__ import annotations
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from .types import ColorScore, Indicator

PERCENT_INDICATORS = frozenset({
    "Nivel de Endeudamiento",
    "Margen Neto",
    "ROA (Retorno sobre Activos)",
    "ROE (Retorno sobre Patrimonio)",
})

# Scores shown as summary metrics; NEUTRAL is never produced by evaluate()
SUMMARY_SCORES = (ColorScore.GOOD, ColorScore.WARNING, ColorScore.BAD)

FIELD_LABELS = {
    "total_assets": "Activo Total",
    "current_assets": "Activo Corriente",
    "inventory": "Inventarios",
    "total_liabilities": "Pasivo Total",
    "current_liabilities": "Pasivo Corriente",
    "total_equity": "Patrimonio Total",
    "net_sales": "Ventas Netas",
    "cost_of_goods_sold": "Costo de Ventas",
    "net_income": "Utilidad Neta",
    "operating_income": "Utilidad Operativa",
    "interest_expense": "Gastos Financieros",
}


def to_fixed(value: float, decimals: int) -> str:
    """
    Fixed-point text with ties rounded away from zero.
    e.g. 1.125 → "1.13" (plain f-string formatting would give "1.12")
    """
    if not math.isfinite(value):
        return str(value)
    quantum = Decimal(1).scaleb(-decimals)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def format_number(value: Optional[float], decimals: int = 2) -> str:
    if value is None:
        return "—"
    return f"{value:,.{decimals}f}"


def format_indicator_value(indicator: Indicator, decimals: int = 2) -> str:
    """Percent-type indicators get a % suffix, ratios an x."""
    if indicator.name in PERCENT_INDICATORS:
        return f"{to_fixed(indicator.value, decimals)}%"
    return f"{to_fixed(indicator.value, decimals)}x"


def field_label(field_name: str) -> str:
    return FIELD_LABELS.get(field_name, field_name)


def get_score_color(score: ColorScore) -> str:
    return {
        ColorScore.GOOD: "#10b981",
        ColorScore.WARNING: "#f59e0b",
        ColorScore.BAD: "#ef4444",
    }.get(score, "#6b7280")


def get_score_icon(score: ColorScore) -> str:
    return {
        ColorScore.GOOD: "👍",
        ColorScore.WARNING: "⚠️",
        ColorScore.BAD: "👎",
    }.get(score, "ℹ️")


def get_score_label(score: ColorScore) -> str:
    return {
        ColorScore.GOOD: "Saludable",
        ColorScore.WARNING: "Atención",
        ColorScore.BAD: "Crítico",
    }.get(score, "Sin evaluar")
