"""
tests/test_evaluator.py
=======================
Ratio engine tests: demo company figures, thresholds, zero-denominator
guards, narrative text, grouping helpers and record validation.

Run:  pytest tests/ -v
"""
import pytest

from fin_eval.evaluator import (
    INDICATOR_NAMES,
    NO_VALID_DATA_MESSAGE,
    evaluate,
    group_by_category,
    score_summary,
    validate_record,
)
from fin_eval.parser import extract
from fin_eval.types import ColorScore, FinancialRecord


def _by_name(indicators):
    return {i.name: i for i in indicators}


# ─── Demo company ─────────────────────────────────────────────────────────────

class TestDemoRecord:
    def test_names_in_order(self, demo):
        assert tuple(i.name for i in evaluate(demo)) == INDICATOR_NAMES

    def test_categories(self, demo):
        assert [i.category for i in evaluate(demo)] == [
            "Liquidez", "Liquidez", "Endeudamiento",
            "Rentabilidad", "Rentabilidad", "Rentabilidad", "Actividad",
        ]

    def test_values(self, demo):
        ind = _by_name(evaluate(demo))
        assert ind["Razón Corriente"].value == pytest.approx(1.5)
        assert ind["Prueba Ácida"].value == pytest.approx(1.0)
        assert ind["Nivel de Endeudamiento"].value == pytest.approx(53.3333, rel=1e-4)
        assert ind["Margen Neto"].value == pytest.approx(15.0)
        assert ind["ROA (Retorno sobre Activos)"].value == pytest.approx(20.0)
        assert ind["ROE (Retorno sobre Patrimonio)"].value == pytest.approx(42.8571, rel=1e-4)
        assert ind["Rotación de Activos"].value == pytest.approx(1.3333, rel=1e-4)

    def test_scores(self, demo):
        assert [i.score for i in evaluate(demo)] == [
            ColorScore.GOOD,      # 1.5 sits on the good boundary
            ColorScore.GOOD,      # 1.0 sits on the good boundary
            ColorScore.WARNING,   # 0.533 is above 0.5 but within 0.7
            ColorScore.GOOD,
            ColorScore.GOOD,
            ColorScore.GOOD,
            ColorScore.GOOD,
        ]

    def test_text(self, demo):
        ind = _by_name(evaluate(demo))
        assert ind["Razón Corriente"].interpretation == (
            "La empresa puede cubrir sus deudas a corto plazo con sus activos corrientes."
        )
        assert ind["Razón Corriente"].recommendation == (
            "Mantener el nivel actual, pero evitar exceso de liquidez ociosa."
        )
        # exactly 1.0: not "> 1" for interpretation, not "< 1" for recommendation
        assert ind["Prueba Ácida"].interpretation == (
            "Alta dependencia del inventario para cubrir obligaciones inmediatas."
        )
        assert ind["Prueba Ácida"].recommendation == "Excelente salud de liquidez inmediata."
        assert ind["Nivel de Endeudamiento"].interpretation == (
            "El 53.3% de los activos está financiado por terceros."
        )
        assert ind["Nivel de Endeudamiento"].recommendation == "Nivel de deuda manejable."
        assert ind["Margen Neto"].interpretation == (
            "Por cada unidad monetaria vendida, la empresa gana 15.0%."
        )
        assert ind["Margen Neto"].recommendation == "Buen control de costos y gastos."
        assert ind["ROA (Retorno sobre Activos)"].interpretation == (
            "Los activos generan una rentabilidad del 20.0%."
        )
        assert ind["ROE (Retorno sobre Patrimonio)"].interpretation == (
            "Los accionistas obtienen un retorno del 42.9% sobre su inversión."
        )
        assert ind["ROE (Retorno sobre Patrimonio)"].recommendation == (
            "Buen retorno para los inversionistas."
        )
        assert ind["Rotación de Activos"].interpretation == (
            "La empresa genera 1.33 veces sus activos en ventas al año."
        )
        assert ind["Rotación de Activos"].recommendation == "Buena eficiencia en el uso de activos."

    def test_idempotent(self, demo):
        assert evaluate(demo) == evaluate(demo)

    def test_record_not_mutated(self, demo):
        before = demo.as_dict()
        evaluate(demo)
        assert demo.as_dict() == before

    def test_indicators_frozen(self, demo):
        ind = evaluate(demo)[0]
        with pytest.raises(Exception):
            ind.value = 99.0


# ─── Zero denominators ────────────────────────────────────────────────────────

class TestZeroGuards:
    def test_empty_record(self):
        indicators = evaluate(FinancialRecord())
        assert len(indicators) == 7
        assert all(i.value == 0.0 for i in indicators)
        assert [i.score for i in indicators] == [
            ColorScore.BAD,       # current ratio 0
            ColorScore.BAD,       # quick ratio 0
            ColorScore.GOOD,      # no debt
            ColorScore.BAD,       # no margin
            ColorScore.WARNING,
            ColorScore.WARNING,
            ColorScore.WARNING,
        ]

    def test_empty_record_text(self):
        ind = _by_name(evaluate(FinancialRecord()))
        assert ind["Nivel de Endeudamiento"].interpretation == (
            "El 0.0% de los activos está financiado por terceros."
        )
        assert ind["Rotación de Activos"].interpretation == (
            "La empresa genera 0.00 veces sus activos en ventas al año."
        )
        # 0 is not below a 0 net margin
        assert ind["ROE (Retorno sobre Patrimonio)"].recommendation == (
            "Buen retorno para los inversionistas."
        )

    def test_zero_current_liabilities_from_sheet(self, make_workbook):
        record = extract(make_workbook([
            ["Activo Total", 100000],
            ["Activo Corriente", 50000],
            ["Pasivo Corriente", "$0"],
            ["Ventas", 200000],
        ]))
        ind = _by_name(evaluate(record))
        assert ind["Razón Corriente"].value == 0.0
        assert ind["Razón Corriente"].score == ColorScore.BAD
        assert ind["Prueba Ácida"].value == 0.0
        assert ind["Rotación de Activos"].value == pytest.approx(2.0)
        assert ind["Rotación de Activos"].score == ColorScore.GOOD

    def test_zero_equity(self, demo):
        demo.total_equity = 0
        ind = _by_name(evaluate(demo))
        assert ind["ROE (Retorno sobre Patrimonio)"].value == 0.0
        assert ind["ROE (Retorno sobre Patrimonio)"].recommendation == (
            "El apalancamiento no está jugando a favor. Revisar deuda."
        )


# ─── Thresholds ───────────────────────────────────────────────────────────────

def _record(**kw):
    return FinancialRecord(**kw)


class TestThresholds:
    @pytest.mark.parametrize("ca,expected", [
        (150, ColorScore.GOOD),
        (149, ColorScore.WARNING),
        (100, ColorScore.WARNING),
        (99, ColorScore.BAD),
    ])
    def test_current_ratio(self, ca, expected):
        ind = evaluate(_record(current_assets=ca, current_liabilities=100))[0]
        assert ind.score == expected

    def test_current_ratio_below_one_text(self):
        ind = evaluate(_record(current_assets=50, current_liabilities=100))[0]
        assert ind.interpretation == (
            "La empresa podría tener dificultades para pagar sus obligaciones a corto plazo."
        )
        assert ind.recommendation == (
            "Renegociar deudas a corto plazo o aumentar el capital de trabajo."
        )

    @pytest.mark.parametrize("ca,inv,expected", [
        (120, 20, ColorScore.GOOD),
        (100, 20, ColorScore.WARNING),
        (99, 20, ColorScore.BAD),
    ])
    def test_quick_ratio(self, ca, inv, expected):
        ind = evaluate(_record(current_assets=ca, inventory=inv, current_liabilities=100))[1]
        assert ind.score == expected

    def test_quick_ratio_above_one_text(self):
        ind = evaluate(_record(current_assets=300, inventory=50, current_liabilities=100))[1]
        assert ind.interpretation.startswith("La empresa tiene buena capacidad de pago inmediato")

    @pytest.mark.parametrize("tl,expected,risky", [
        (50, ColorScore.GOOD, False),
        (70, ColorScore.WARNING, False),
        (71, ColorScore.BAD, True),
    ])
    def test_debt_ratio(self, tl, expected, risky):
        ind = evaluate(_record(total_assets=100, total_liabilities=tl))[2]
        assert ind.score == expected
        assert ind.value == pytest.approx(tl)
        if risky:
            assert ind.recommendation == "Riesgo alto. Buscar capitalización o reducir pasivos."
        else:
            assert ind.recommendation == "Nivel de deuda manejable."

    @pytest.mark.parametrize("ni,expected", [
        (11, ColorScore.GOOD),
        (10, ColorScore.WARNING),
        (1, ColorScore.WARNING),
        (0, ColorScore.BAD),
        (-5, ColorScore.BAD),
    ])
    def test_net_margin(self, ni, expected):
        ind = evaluate(_record(net_sales=100, net_income=ni))[3]
        assert ind.score == expected

    def test_net_margin_low_recommendation(self):
        ind = evaluate(_record(net_sales=100, net_income=4))[3]
        assert ind.recommendation == "Revisar estructura de costos y gastos. Evaluar precios de venta."

    def test_roa_has_no_bad_branch(self):
        ind = evaluate(_record(total_assets=100, net_income=-50))[4]
        assert ind.score == ColorScore.WARNING
        assert ind.recommendation == "Optimizar el uso de activos para generar más ventas."

    def test_roa_boundary(self):
        assert evaluate(_record(total_assets=100, net_income=5))[4].score == ColorScore.WARNING
        assert evaluate(_record(total_assets=100, net_income=6))[4].score == ColorScore.GOOD

    def test_roe_below_margin(self):
        # margin 0.20, ROE 0.10
        ind = evaluate(_record(net_sales=50, net_income=10, total_equity=100))[5]
        assert ind.score == ColorScore.WARNING
        assert ind.recommendation == "El apalancamiento no está jugando a favor. Revisar deuda."

    def test_asset_turnover_boundary(self):
        ind = evaluate(_record(total_assets=100, net_sales=100))[6]
        assert ind.score == ColorScore.WARNING
        assert ind.recommendation == "Buena eficiencia en el uso de activos."

    def test_asset_turnover_low(self):
        ind = evaluate(_record(total_assets=100, net_sales=50))[6]
        assert ind.recommendation == (
            "Ventas bajas en relación al tamaño de la empresa. Impulsar ventas."
        )

    def test_half_up_rounding_in_text(self):
        ind = evaluate(_record(total_assets=1000, net_sales=1125))[6]
        assert ind.interpretation == "La empresa genera 1.13 veces sus activos en ventas al año."


# ─── Helpers ──────────────────────────────────────────────────────────────────

class TestGrouping:
    def test_group_by_category(self, demo):
        grouped = group_by_category(evaluate(demo))
        assert list(grouped) == ["Liquidez", "Endeudamiento", "Rentabilidad", "Actividad"]
        assert [len(v) for v in grouped.values()] == [2, 1, 3, 1]

    def test_score_summary(self, demo):
        counts = score_summary(evaluate(demo))
        assert counts == {
            ColorScore.GOOD: 6,
            ColorScore.WARNING: 1,
            ColorScore.BAD: 0,
            ColorScore.NEUTRAL: 0,
        }

    def test_score_summary_empty(self):
        assert sum(score_summary([]).values()) == 0


class TestValidateRecord:
    def test_demo_valid(self, demo):
        report = validate_record(demo)
        assert report.valid
        assert report.errors == []
        assert report.warnings == []

    def test_empty_invalid(self):
        report = validate_record(FinancialRecord())
        assert not report.valid
        assert report.errors[0] == NO_VALID_DATA_MESSAGE
        assert len(report.errors) == 3
        assert len(report.warnings) == 3

    def test_missing_sales_only(self, demo):
        demo.net_sales = 0
        report = validate_record(demo)
        assert not report.valid
        assert report.errors == [NO_VALID_DATA_MESSAGE, "Ventas no encontradas o iguales a cero."]

    def test_zero_current_liabilities_warning(self, demo):
        demo.current_liabilities = 0
        report = validate_record(demo)
        assert report.valid
        assert len(report.warnings) == 1
        assert "Razón Corriente" in report.warnings[0]
