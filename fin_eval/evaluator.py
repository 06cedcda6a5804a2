"""
fin_eval/evaluator.py
=====================
Ratio evaluation engine.

Covers:
  - Liquidez: Razón Corriente, Prueba Ácida
  - Endeudamiento: Nivel de Endeudamiento
  - Rentabilidad: Margen Neto, ROA, ROE
  - Actividad: Rotación de Activos

Every ratio with a zero denominator evaluates to 0.0, so evaluate() never
raises. Percent-type indicators carry value * 100; thresholds are always
checked on the raw fraction.
"""
from __future__ import annotations
import logging
from collections import OrderedDict
from typing import Dict, List, Sequence

from .formatting import to_fixed
from .types import ColorScore, FinancialRecord, Indicator, ValidationReport

logger = logging.getLogger(__name__)

INDICATOR_NAMES = (
    "Razón Corriente",
    "Prueba Ácida",
    "Nivel de Endeudamiento",
    "Margen Neto",
    "ROA (Retorno sobre Activos)",
    "ROE (Retorno sobre Patrimonio)",
    "Rotación de Activos",
)

NO_VALID_DATA_MESSAGE = (
    "No se pudieron detectar datos financieros válidos. Asegúrate de que el Excel "
    "tenga columnas con nombres como 'Activo Total', 'Ventas', 'Utilidad Neta'."
)


def _safe_div(num: float, den: float) -> float:
    return num / den if den != 0 else 0.0


# ─── Liquidez ─────────────────────────────────────────────────────────────────

def _current_ratio(data: FinancialRecord) -> Indicator:
    ratio = _safe_div(data.current_assets, data.current_liabilities)
    if ratio >= 1.5:
        score = ColorScore.GOOD
    elif ratio >= 1:
        score = ColorScore.WARNING
    else:
        score = ColorScore.BAD
    return Indicator(
        category="Liquidez",
        name="Razón Corriente",
        value=ratio,
        interpretation=(
            "La empresa puede cubrir sus deudas a corto plazo con sus activos corrientes."
            if ratio > 1 else
            "La empresa podría tener dificultades para pagar sus obligaciones a corto plazo."
        ),
        recommendation=(
            "Renegociar deudas a corto plazo o aumentar el capital de trabajo."
            if ratio < 1 else
            "Mantener el nivel actual, pero evitar exceso de liquidez ociosa."
        ),
        score=score,
    )


def _quick_ratio(data: FinancialRecord) -> Indicator:
    # Acid test: current assets without inventories
    ratio = _safe_div(data.current_assets - data.inventory, data.current_liabilities)
    if ratio >= 1:
        score = ColorScore.GOOD
    elif ratio >= 0.8:
        score = ColorScore.WARNING
    else:
        score = ColorScore.BAD
    return Indicator(
        category="Liquidez",
        name="Prueba Ácida",
        value=ratio,
        interpretation=(
            "La empresa tiene buena capacidad de pago inmediato sin depender de la venta de inventarios."
            if ratio > 1 else
            "Alta dependencia del inventario para cubrir obligaciones inmediatas."
        ),
        recommendation=(
            "Mejorar la gestión de cobro de cartera o reducir niveles de inventario."
            if ratio < 1 else
            "Excelente salud de liquidez inmediata."
        ),
        score=score,
    )


# ─── Endeudamiento ────────────────────────────────────────────────────────────

def _debt_ratio(data: FinancialRecord) -> Indicator:
    ratio = _safe_div(data.total_liabilities, data.total_assets)
    if ratio <= 0.5:
        score = ColorScore.GOOD
    elif ratio <= 0.7:
        score = ColorScore.WARNING
    else:
        score = ColorScore.BAD
    return Indicator(
        category="Endeudamiento",
        name="Nivel de Endeudamiento",
        value=ratio * 100,
        interpretation=f"El {to_fixed(ratio * 100, 1)}% de los activos está financiado por terceros.",
        recommendation=(
            "Riesgo alto. Buscar capitalización o reducir pasivos."
            if ratio > 0.7 else
            "Nivel de deuda manejable."
        ),
        score=score,
    )


# ─── Rentabilidad ─────────────────────────────────────────────────────────────

def _net_margin(data: FinancialRecord) -> float:
    return _safe_div(data.net_income, data.net_sales)


def _net_margin_indicator(data: FinancialRecord) -> Indicator:
    margin = _net_margin(data)
    if margin > 0.10:
        score = ColorScore.GOOD
    elif margin > 0:
        score = ColorScore.WARNING
    else:
        score = ColorScore.BAD
    return Indicator(
        category="Rentabilidad",
        name="Margen Neto",
        value=margin * 100,
        interpretation=f"Por cada unidad monetaria vendida, la empresa gana {to_fixed(margin * 100, 1)}%.",
        recommendation=(
            "Revisar estructura de costos y gastos. Evaluar precios de venta."
            if margin < 0.05 else
            "Buen control de costos y gastos."
        ),
        score=score,
    )


def _roa(data: FinancialRecord) -> Indicator:
    roa = _safe_div(data.net_income, data.total_assets)
    return Indicator(
        category="Rentabilidad",
        name="ROA (Retorno sobre Activos)",
        value=roa * 100,
        interpretation=f"Los activos generan una rentabilidad del {to_fixed(roa * 100, 1)}%.",
        recommendation=(
            "Optimizar el uso de activos para generar más ventas."
            if roa < 0.05 else
            "Los activos están siendo utilizados eficientemente."
        ),
        score=ColorScore.GOOD if roa > 0.05 else ColorScore.WARNING,
    )


def _roe(data: FinancialRecord) -> Indicator:
    roe = _safe_div(data.net_income, data.total_equity)
    # Leverage works against shareholders when ROE trails the net margin
    return Indicator(
        category="Rentabilidad",
        name="ROE (Retorno sobre Patrimonio)",
        value=roe * 100,
        interpretation=f"Los accionistas obtienen un retorno del {to_fixed(roe * 100, 1)}% sobre su inversión.",
        recommendation=(
            "El apalancamiento no está jugando a favor. Revisar deuda."
            if roe < _net_margin(data) else
            "Buen retorno para los inversionistas."
        ),
        score=ColorScore.GOOD if roe > 0.10 else ColorScore.WARNING,
    )


# ─── Actividad ────────────────────────────────────────────────────────────────

def _asset_turnover(data: FinancialRecord) -> Indicator:
    turnover = _safe_div(data.net_sales, data.total_assets)
    return Indicator(
        category="Actividad",
        name="Rotación de Activos",
        value=turnover,
        interpretation=f"La empresa genera {to_fixed(turnover, 2)} veces sus activos en ventas al año.",
        recommendation=(
            "Ventas bajas en relación al tamaño de la empresa. Impulsar ventas."
            if turnover < 1 else
            "Buena eficiencia en el uso de activos."
        ),
        score=ColorScore.GOOD if turnover > 1 else ColorScore.WARNING,
    )


_BUILDERS = (
    _current_ratio,
    _quick_ratio,
    _debt_ratio,
    _net_margin_indicator,
    _roa,
    _roe,
    _asset_turnover,
)


# ─── Public API ───────────────────────────────────────────────────────────────

def evaluate(data: FinancialRecord) -> List[Indicator]:
    """Compute the seven indicators, always in INDICATOR_NAMES order."""
    indicators = [build(data) for build in _BUILDERS]
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Evaluated %d indicators: %s", len(indicators),
            ", ".join(f"{i.name}={i.value:.4f}/{i.score.value}" for i in indicators),
        )
    return indicators


def group_by_category(indicators: Sequence[Indicator]) -> "OrderedDict[str, List[Indicator]]":
    """Group indicators by category, preserving first-appearance order."""
    grouped: "OrderedDict[str, List[Indicator]]" = OrderedDict()
    for ind in indicators:
        grouped.setdefault(ind.category, []).append(ind)
    return grouped


def score_summary(indicators: Sequence[Indicator]) -> Dict[ColorScore, int]:
    counts = {score: 0 for score in ColorScore}
    for ind in indicators:
        counts[ind.score] += 1
    return counts


def validate_record(data: FinancialRecord) -> ValidationReport:
    """
    Check an extracted record before evaluation.
    `valid` mirrors FinancialRecord.is_valid; warnings flag ratios that a
    zero denominator will force to 0.
    """
    report = ValidationReport(valid=data.is_valid)

    if not data.is_valid:
        report.errors.append(NO_VALID_DATA_MESSAGE)
        if data.total_assets <= 0:
            report.errors.append("Activo Total no encontrado o igual a cero.")
        if data.net_sales <= 0:
            report.errors.append("Ventas no encontradas o iguales a cero.")

    if data.current_liabilities == 0:
        report.warnings.append(
            "Pasivo Corriente es cero: Razón Corriente y Prueba Ácida se reportan como 0."
        )
    if data.total_equity == 0:
        report.warnings.append("Patrimonio es cero: ROE se reporta como 0.")
    if data.net_income == 0:
        report.warnings.append("Utilidad Neta no encontrada: los indicadores de rentabilidad serán 0.")

    return report
