"""
app.py
======
Evaluación Financiera Inteligente — Streamlit front-end

Steps:
  1. Upload an Excel statement (or load the demo company)
  2. Review the extracted figures
  3. Evaluate: indicators grouped by category with traffic-light scores
"""

import logging
from typing import List

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from fin_eval.config import AppConfig
from fin_eval.types import FinancialRecord, Indicator, demo_record
from fin_eval.parser import extract_file
from fin_eval.evaluator import (
    NO_VALID_DATA_MESSAGE, evaluate, group_by_category, score_summary, validate_record,
)
from fin_eval.formatting import (
    SUMMARY_SCORES, field_label, format_indicator_value, format_number, get_score_color,
    get_score_icon, get_score_label, to_fixed,
)

CONFIG = AppConfig.from_env()
logging.basicConfig(
    level=getattr(logging, CONFIG.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("fin_eval.app")

# ─── Page Configuration ───────────────────────────────────────────────────────

st.set_page_config(
    page_title="Evaluación Financiera",
    page_icon="📊",
    layout="centered",
)

st.markdown("""
<style>
    .main-header {
        background: linear-gradient(135deg, #1e40af 0%, #3730a3 100%);
        border-radius: 12px;
        padding: 1.2rem 1.5rem;
        color: white;
        margin-bottom: 1.5rem;
    }
    .main-header h1 { margin: 0; font-size: 1.6rem; font-weight: 700; }
    .main-header p  { margin: 0.25rem 0 0; font-size: 0.85rem; opacity: 0.85; }
    .category-chip {
        display: inline-block; background: #e0e7ff; color: #3730a3;
        border-radius: 999px; padding: 0.2rem 0.8rem; margin: 0.8rem 0 0.4rem;
        font-size: 0.8rem; font-weight: 700; letter-spacing: 0.05em;
    }
</style>
""", unsafe_allow_html=True)

st.markdown("""
<div class='main-header'>
  <h1>📊 Evaluación Financiera Inteligente</h1>
  <p>Liquidez • Endeudamiento • Rentabilidad • Actividad</p>
</div>
""", unsafe_allow_html=True)


# ─── Helpers ─────────────────────────────────────────────────────────────────

@st.cache_data(ttl=CONFIG.cache_ttl)
def _extract_cached(file_bytes: bytes, filename: str) -> FinancialRecord:
    return extract_file(file_bytes, filename)


def _record_table(record: FinancialRecord) -> pd.DataFrame:
    rows = [
        {"Cuenta": field_label(name), "Valor": format_number(value)}
        for name, value in record.as_dict().items()
    ]
    return pd.DataFrame(rows)


def _build_score_bar(indicators: List[Indicator]) -> go.Figure:
    names = [i.name for i in indicators]
    vals = [i.value for i in indicators]
    colors = [get_score_color(i.score) for i in indicators]
    fig = go.Figure(go.Bar(
        x=vals, y=names, orientation="h", marker_color=colors,
        text=[format_indicator_value(i) for i in indicators], textposition="auto",
    ))
    fig.update_layout(
        title=dict(text="Indicadores", font=dict(size=14, color="#1e293b")),
        paper_bgcolor="white", plot_bgcolor="#f8fafc",
        margin=dict(l=40, r=20, t=40, b=30),
        height=320, showlegend=False,
        font=dict(family="sans-serif", size=11, color="#64748b"),
        xaxis=dict(gridcolor="#e2e8f0"), yaxis=dict(autorange="reversed"),
    )
    return fig


def _render_indicator(indicator: Indicator) -> None:
    color = get_score_color(indicator.score)
    icon = get_score_icon(indicator.score)
    title = f"{icon} **{indicator.name}** — Valor: {to_fixed(indicator.value, 2)}"
    with st.expander(title):
        st.markdown(
            f"<span style='color:{color}; font-weight:700;'>{get_score_label(indicator.score)}</span>",
            unsafe_allow_html=True,
        )
        st.markdown("**Interpretación:**")
        st.write(indicator.interpretation)
        st.markdown("**Recomendación:**")
        st.markdown(f"*{indicator.recommendation}*")


def _render_results(indicators: List[Indicator]) -> None:
    st.markdown("### Resultados de la Evaluación")

    counts = score_summary(indicators)
    for col, score in zip(st.columns(len(SUMMARY_SCORES)), SUMMARY_SCORES):
        col.metric(get_score_label(score), counts[score])

    st.plotly_chart(_build_score_bar(indicators), width='stretch')

    for category, items in group_by_category(indicators).items():
        st.markdown(f"<div class='category-chip'>{category.upper()}</div>", unsafe_allow_html=True)
        for indicator in items:
            _render_indicator(indicator)


# ─── Session State ────────────────────────────────────────────────────────────

def _init_state() -> None:
    defaults = {
        "file_name": None,
        "record": None,
        "results": None,
        "error": None,
    }
    for k, v in defaults.items():
        if k not in st.session_state:
            st.session_state[k] = v


_init_state()


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 1: UPLOAD
# ═══════════════════════════════════════════════════════════════════════════════

st.markdown("### 📁 Cargar Estados Financieros")
st.caption(
    'Formato Excel (.xlsx). El sistema buscará automáticamente filas como "Activo Total", "Ventas", etc.'
)

uploaded = st.file_uploader(
    "Subir Excel",
    type=list(CONFIG.allowed_extensions),
    label_visibility="collapsed",
)

col_a, col_b = st.columns(2)
with col_a:
    if uploaded is not None and st.button("Procesar archivo", type="primary", width='stretch'):
        st.session_state.update({"results": None, "error": None})
        try:
            file_bytes = uploaded.getvalue()
            if len(file_bytes) > CONFIG.max_upload_bytes:
                raise ValueError(f"el archivo supera {CONFIG.max_upload_mb} MB")
            with st.spinner("Procesando..."):
                record = _extract_cached(file_bytes, uploaded.name)
            st.session_state.update({"file_name": uploaded.name, "record": record})
            if not record.is_valid:
                st.session_state["error"] = NO_VALID_DATA_MESSAGE
        except Exception as e:
            logger.exception("Upload failed for %s", uploaded.name)
            st.session_state.update({"record": None, "error": f"Error al leer el archivo: {e}"})
with col_b:
    if st.button("Probar Demo", width='stretch'):
        st.session_state.update({
            "file_name": "Datos de Prueba (Demo)",
            "record": demo_record(),
            "results": None,
            "error": None,
        })


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 2: REVIEW
# ═══════════════════════════════════════════════════════════════════════════════

record: FinancialRecord = st.session_state["record"]

if st.session_state["error"]:
    st.error(st.session_state["error"])

if record is not None:
    st.success(f"✅ Archivo cargado: {st.session_state['file_name']}")

    report = validate_record(record)
    for w in report.warnings:
        st.warning(w)

    with st.expander("Datos extraídos"):
        st.dataframe(_record_table(record), hide_index=True, width='stretch')

    if report.valid and st.button("▶ Evaluar Finanzas", type="primary", width='stretch'):
        st.session_state["results"] = evaluate(record)


# ═══════════════════════════════════════════════════════════════════════════════
# STEP 3: RESULTS
# ═══════════════════════════════════════════════════════════════════════════════

if st.session_state["results"]:
    _render_results(st.session_state["results"])
