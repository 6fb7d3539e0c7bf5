"""
Dashboard component for the Agro Dashboard application.

This module renders the fetched results: KPIs, the top municipalities bar
chart, the regional time series and the municipality table.
"""

import streamlit as st
import matplotlib.pyplot as plt
import logging

from models.data_models import ControllerStatus
from utils.data_processing import (
    choropleth_table,
    format_number,
    timeseries_frame,
    top_entities_frame
)
from utils.visualization import ChartBuilder

logger = logging.getLogger(__name__)

def render_dashboard(controller, chart_builder: ChartBuilder, table_row_limit: int) -> None:
    """
    Render every dashboard section from the controller's latest results.

    Args:
        controller: RefinementController with the latest result bundle
        chart_builder: Builder for the two charts
        table_row_limit: Maximum number of rows in the table
    """
    result = controller.result
    state = controller.state

    st.title("Dashboard do Agronegócio")

    _render_refinement_notice(controller)
    _render_kpis(result.overview)

    col1, col2 = st.columns(2)

    with col1:
        st.markdown("#### Top municípios")
        st.caption(f"{state.crop or '—'} • {state.region or 'UF'} • {state.metric}")
        fig = chart_builder.create_top_entities_chart(top_entities_frame(result.overview), state.metric)
        _show_figure(fig, "Sem detalhamento…")

    with col2:
        st.markdown("#### Série temporal")
        st.caption(f"{state.region or 'UF'} • {state.metric}")
        fig = chart_builder.create_timeseries_chart(
            timeseries_frame(result.timeseries), state.region, state.metric
        )
        _show_figure(fig, "Nenhum ponto…")

    st.markdown("#### Dados por município")
    st.caption(f"Mostrando até {table_row_limit} linhas")
    table = choropleth_table(result.choropleth, table_row_limit)
    if table.empty:
        st.info("Sem dados…")
    else:
        st.dataframe(table, width="stretch", hide_index=True)

def _show_figure(fig, placeholder: str) -> None:
    if fig is None:
        st.info(placeholder)
        return
    st.pyplot(fig)
    plt.close(fig)

def _render_kpis(overview) -> None:
    """Show the three headline totals."""
    kpis = overview.kpis if overview else None

    col1, col2, col3 = st.columns(3)
    with col1:
        st.metric("Área (ha)", format_number(kpis.area_ha if kpis else None))
    with col2:
        st.metric("Produção (t)", format_number(kpis.producao_t if kpis else None))
    with col3:
        st.metric("Valor (mil R$)", format_number(kpis.valor_mil_reais if kpis else None))

def refinement_notice(controller):
    """
    Pick the notice about automatic filter changes, if any.

    Returns:
        ("warning" | "info", message), or None when the last refresh
        found data without relaxing anything
    """
    if controller.status == ControllerStatus.DEGENERATE_FINAL:
        return "warning", "⚠️ Nenhum dado encontrado para os filtros selecionados, mesmo após ajustes automáticos."
    if controller.relaxed_last_refresh and controller.status == ControllerStatus.SUCCESS:
        return "info", f"ℹ️ Filtros ajustados automaticamente ({controller.relaxed_last_refresh}x) para encontrar dados."
    return None

def _render_refinement_notice(controller) -> None:
    notice = refinement_notice(controller)
    if notice is None:
        return
    kind, message = notice
    if kind == "warning":
        st.warning(message)
    else:
        st.info(message)
