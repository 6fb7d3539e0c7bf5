"""
Agro Dashboard

Single-page dashboard over an agricultural statistics API.
Flow: load filter metadata -> pick filters -> fetch (with automatic
refinement of empty results) -> KPIs, charts and table.
"""

import streamlit as st
import logging
import sys
from dataclasses import asdict
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Page configuration
st.set_page_config(
    page_title="Dashboard do Agronegócio",
    page_icon="🌾",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Import core modules
try:
    from config.config_manager import ConfigManager
    from services.agro_stats_service import AgroStatsService
    from services.exceptions import FetchError, MetadataLoadError
    from features.refinement_controller import RefinementController
    from components.sidebar import create_sidebar, sync_widgets_from_controller
    from components.dashboard import render_dashboard
    from utils.visualization import ChartBuilder

except ImportError as e:
    st.error(f"Error importing modules: {str(e)}")
    st.stop()

def initialize_services():
    """Initialize configuration, the API client and the refinement controller."""
    if st.session_state.get('services_initialized'):
        return

    config = ConfigManager()
    st.session_state.config = config

    service = st.session_state.get('stats_service')
    if service is None:
        service = AgroStatsService(
            base_url=config.get_api_base_url(),
            timeout=config.get_request_timeout()
        )
        st.session_state.stats_service = service

    st.session_state.chart_builder = ChartBuilder(
        colors=config.get('ui.color_palette')
    )

    try:
        with st.spinner("Carregando filtros..."):
            controller = RefinementController.from_service(
                service,
                max_attempts=config.get_max_refinement_attempts()
            )
    except MetadataLoadError as e:
        logger.error(f"Metadata load error: {str(e)}")
        st.session_state.controller = None
        st.session_state.metadata_error = str(e)
        return

    st.session_state.controller = controller
    st.session_state.metadata_error = None
    st.session_state.services_initialized = True
    logger.info("Services initialized successfully")

def run_pending_refresh(controller) -> None:
    """Run the fetch loop if the filters changed since the last run."""
    if not controller.needs_refresh:
        return

    try:
        with st.spinner("Carregando dados..."):
            controller.refresh()
    except FetchError as e:
        logger.error(f"Data fetch error at stage {e.stage}: {str(e)}")

def main():
    """Main application entry point."""
    initialize_services()

    controller = st.session_state.get('controller')
    if controller is None:
        st.title("Dashboard do Agronegócio")
        st.error(f"❌ {st.session_state.get('metadata_error') or 'Erro ao buscar filtros'}")
        if st.button("🔄 Tentar novamente"):
            st.rerun()
        return

    run_pending_refresh(controller)

    # Widgets must follow the controller, including automatic relaxations
    sync_widgets_from_controller(controller)
    create_sidebar(controller)

    if controller.error is not None:
        st.error(f"❌ {str(controller.error)}")

    config = st.session_state.config
    render_dashboard(
        controller,
        st.session_state.chart_builder,
        config.get_table_row_limit()
    )

    if config.get_bool('ui.show_debug_info', False):
        with st.expander("Debug"):
            st.json({
                'filters': asdict(controller.state),
                'status': controller.status.value,
                'attempts': controller.attempts,
                'max_attempts': controller.max_attempts
            })

if __name__ == "__main__":
    main()
