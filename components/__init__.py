"""
Components package for the Agro Dashboard application.

This package contains the Streamlit UI pieces: the filter sidebar and the
dashboard body.
"""

from components.sidebar import create_sidebar, sync_widgets_from_controller
from components.dashboard import render_dashboard

__all__ = [
    'create_sidebar',
    'sync_widgets_from_controller',
    'render_dashboard'
]
