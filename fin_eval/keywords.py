"""
fin_eval/keywords.py
====================
Row-label keyword rules. Each rule maps a set of Spanish statement labels
onto one FinancialRecord field.

Rules are checked in list order and the first hit wins, so a label such as
"Activo Total Corriente" lands on total_assets and never on current_assets.
"""
from __future__ import annotations
from typing import List, Optional


class KeywordRule:
    __slots__ = ("field", "patterns")

    def __init__(self, field: str, patterns: List[str]):
        self.field = field
        self.patterns = patterns

    def matches(self, label: str) -> bool:
        return any(p in label for p in self.patterns)

    def __repr__(self) -> str:
        return f"KeywordRule({self.field!r}, {self.patterns!r})"


# ─── Rule Table (priority order) ──────────────────────────────────────────────

KEYWORD_RULES: List[KeywordRule] = [
    # ── Balance General ─────────────────────────────────────────────────────
    KeywordRule("total_assets", ["activo total"]),
    KeywordRule("current_assets", ["activo corriente", "activos circulantes"]),
    KeywordRule("inventory", ["inventario"]),
    KeywordRule("total_liabilities", ["pasivo total"]),
    KeywordRule("current_liabilities", ["pasivo corriente", "pasivos circulantes"]),
    KeywordRule("total_equity", ["patrimonio", "capital contable"]),
    # ── Estado de Resultados ────────────────────────────────────────────────
    KeywordRule("net_sales", ["ventas", "ingresos operacionales"]),
    KeywordRule("cost_of_goods_sold", ["costo de venta"]),
    KeywordRule("net_income", ["utilidad neta", "resultado neto"]),
    KeywordRule("operating_income", ["utilidad operativa"]),
    KeywordRule("interest_expense", ["gastos financieros", "intereses"]),
]


def normalize_label(raw) -> str:
    """Case-fold a label cell. Absent cells become the empty string."""
    if raw is None:
        return ""
    if isinstance(raw, float) and raw != raw:  # NaN from pandas
        return ""
    return str(raw).lower()


def match_field(label: str) -> Optional[str]:
    """Return the field for an already-normalized label, or None."""
    for rule in KEYWORD_RULES:
        if rule.matches(label):
            return rule.field
    return None
