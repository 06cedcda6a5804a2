"""
tests/conftest.py
=================
Shared pytest fixtures for the fin_eval test suite.
"""
import io
import os
import sys

# Ensure the project root is on the path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from openpyxl import Workbook

from fin_eval.types import demo_record


def _workbook_bytes(*sheets):
    """Build an .xlsx in memory. Each sheet is (title, rows)."""
    wb = Workbook()
    wb.remove(wb.active)
    for title, rows in sheets:
        ws = wb.create_sheet(title)
        for row in rows:
            ws.append(list(row))
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


@pytest.fixture
def make_workbook():
    """Factory: make_workbook(rows) or make_workbook(("Hoja1", rows), ("Hoja2", rows))."""
    def _make(*args):
        if len(args) == 1 and not isinstance(args[0], tuple):
            return _workbook_bytes(("Balance", args[0]))
        return _workbook_bytes(*args)
    return _make


@pytest.fixture
def demo():
    return demo_record()


@pytest.fixture
def statement_rows():
    """A complete single-sheet statement using the labels companies actually export."""
    return [
        ["Estado de Situación Financiera", None],
        ["ACTIVO CORRIENTE", 60000],
        ["Inventarios", 20000],
        ["ACTIVO TOTAL", 150000],
        ["Pasivo Corriente", "40,000"],
        ["Pasivo Total", "$80,000"],
        ["Patrimonio", 70000.0],
        ["Estado de Resultados", None],
        ["Ventas Netas", 200000],
        ["Costo de venta", 120000],
        ["Utilidad Operativa", 45000],
        ["Gastos Financieros", 5000],
        ["Utilidad Neta", 30000],
    ]
