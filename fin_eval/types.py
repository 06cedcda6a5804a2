"""
fin_eval/types.py
=================
Dataclasses for the extraction/evaluation pipeline.
Raw spreadsheet figures in, scored indicators out.
"""
from __future__ import annotations
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Dict, List, Literal

# ─── Core Types ───────────────────────────────────────────────────────────────

Category = Literal["Liquidez", "Endeudamiento", "Rentabilidad", "Actividad"]


class ColorScore(Enum):
    """Traffic-light classification of an indicator."""
    GOOD = "good"
    WARNING = "warning"
    BAD = "bad"
    NEUTRAL = "neutral"


@dataclass
class FinancialRecord:
    """Figures extracted from a single statement sheet. Missing rows stay at 0.0."""
    total_assets: float = 0.0          # Activo Total
    current_assets: float = 0.0        # Activo Corriente
    inventory: float = 0.0             # Inventarios
    total_liabilities: float = 0.0     # Pasivo Total
    current_liabilities: float = 0.0   # Pasivo Corriente
    total_equity: float = 0.0          # Patrimonio Total
    net_sales: float = 0.0             # Ventas Netas
    cost_of_goods_sold: float = 0.0    # Costo de Ventas
    net_income: float = 0.0            # Utilidad Neta
    operating_income: float = 0.0      # Utilidad Operativa
    interest_expense: float = 0.0      # Gastos Financieros

    @property
    def is_valid(self) -> bool:
        return self.total_assets > 0 and self.net_sales > 0

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


RECORD_FIELDS: List[str] = [f.name for f in fields(FinancialRecord)]


@dataclass(frozen=True)
class Indicator:
    category: Category
    name: str
    value: float
    interpretation: str
    recommendation: str
    score: ColorScore


@dataclass
class ValidationReport:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


# ─── Demo Data ────────────────────────────────────────────────────────────────

def demo_record() -> FinancialRecord:
    """Sample company used by the "Probar Demo" button and the test suite."""
    return FinancialRecord(
        total_assets=150000,
        current_assets=60000,
        inventory=20000,
        total_liabilities=80000,
        current_liabilities=40000,
        total_equity=70000,
        net_sales=200000,
        cost_of_goods_sold=120000,
        net_income=30000,
        operating_income=45000,
        interest_expense=5000,
    )
