"""
Sidebar component for the Agro Dashboard application.

This module provides the filter widgets. Widget changes are forwarded to the
refinement controller through ``on_change`` callbacks, and the widgets are
synced back from the controller before drawing so that automatic
relaxations are visible to the user.
"""

import streamlit as st
import logging

from config.constants import METRIC_LABELS, METRIC_ORDER

logger = logging.getLogger(__name__)

# Session keys of the filter widgets, by FilterState field
WIDGET_KEYS = {
    'crop': 'filter_crop',
    'year': 'filter_year',
    'region': 'filter_region',
    'metric': 'filter_metric'
}

def sync_widgets_from_controller(controller) -> None:
    """
    Copy the controller's filters into the widget session keys.

    Must run before the widgets are created in the current script run.
    """
    for field_name, key in WIDGET_KEYS.items():
        st.session_state[key] = getattr(controller.state, field_name)

def _on_filter_change(field_name: str) -> None:
    controller = st.session_state.get('controller')
    if controller is None:
        return
    value = st.session_state.get(WIDGET_KEYS[field_name], "")
    controller.update_filters(**{field_name: value})

def _options_with_current(options, current: str, placeholder: bool = True):
    """Selectbox options: blank entry first, and the current value even if unlisted."""
    values = [""] if placeholder else []
    values.extend(options)
    if current and current not in values:
        values.append(current)
    return values

def create_sidebar(controller) -> None:
    """
    Create the sidebar with the filter widgets.

    Args:
        controller: RefinementController holding the current filters
    """
    metadata = controller.metadata
    state = controller.state

    with st.sidebar:
        st.markdown("## 🌾 Filtros")

        st.selectbox(
            "Cultura",
            options=_options_with_current(metadata.crops, state.crop),
            format_func=lambda c: c or "Cultura",
            key=WIDGET_KEYS['crop'],
            on_change=_on_filter_change,
            args=('crop',)
        )

        st.selectbox(
            "Ano",
            options=_options_with_current(metadata.years, state.year),
            format_func=lambda a: a or "Ano",
            key=WIDGET_KEYS['year'],
            on_change=_on_filter_change,
            args=('year',)
        )

        st.selectbox(
            "UF",
            options=_options_with_current(metadata.regions, state.region),
            format_func=lambda u: u or "UF (opcional)",
            key=WIDGET_KEYS['region'],
            on_change=_on_filter_change,
            args=('region',)
        )

        st.selectbox(
            "Variável",
            options=_options_with_current(METRIC_ORDER, state.metric, placeholder=False),
            format_func=lambda m: METRIC_LABELS.get(m, m),
            key=WIDGET_KEYS['metric'],
            on_change=_on_filter_change,
            args=('metric',)
        )

        st.markdown("---")

        if st.button("🔄 Recarregar filtros", width="stretch"):
            # Rebuilding the controller is the only way to reset the refinement budget
            st.session_state.services_initialized = False
            st.session_state.controller = None
            st.rerun()

        if controller.attempts:
            st.caption(f"Ajustes automáticos: {controller.attempts}/{controller.max_attempts}")
