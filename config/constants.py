"""
Constants for the Agro Dashboard application configuration.

This module provides default paths, values, and configuration structures
used throughout the application.
"""

import os

# Configuration file path
DEFAULT_CONFIG_PATH = os.path.join(os.path.dirname(os.path.dirname(__file__)), "config", "config.yml")

# Environment variable that overrides the API base URL
API_URL_ENV_VAR = "AGRO_API_URL"

# Default statistics API settings
DEFAULT_API_URL = "http://localhost:8000"
DEFAULT_REQUEST_TIMEOUT = 30  # seconds

# Maximum number of automatic filter relaxations per session
DEFAULT_MAX_REFINEMENT_ATTEMPTS = 3

# Number of municipality rows shown in the table
DEFAULT_TABLE_ROW_LIMIT = 50

# API endpoints
FILTERS_ENDPOINT = "/filters"
OVERVIEW_ENDPOINT = "/stats/overview"
CHOROPLETH_ENDPOINT = "/map/choropleth"
TIMESERIES_ENDPOINT = "/timeseries"

# Metrics, in relaxation priority order
METRIC_ORDER = ["valor_mil_reais", "area_ha", "producao_t"]

METRIC_LABELS = {
    "valor_mil_reais": "Valor (mil R$)",
    "area_ha": "Área (ha)",
    "producao_t": "Produção (t)"
}

# Aggregate crop that is never picked automatically
TOTAL_CROP = "Total"

# Region preferred as the initial selection
DEFAULT_REGION = "SP"

# Fewer regions than this from the API means the list is unusable
MIN_REGION_COUNT = 5

# Canonical list of Brazilian state codes
UF_ALL = [
    "AC", "AL", "AM", "AP", "BA", "CE", "DF", "ES", "GO", "MA", "MG", "MS", "MT", "PA",
    "PB", "PE", "PI", "PR", "RJ", "RN", "RO", "RR", "RS", "SC", "SE", "SP", "TO"
]

# Fetch stages and the user-facing message for each
STAGE_OVERVIEW = "overview"
STAGE_CHOROPLETH = "choropleth"
STAGE_TIMESERIES = "timeseries"

STAGE_MESSAGES = {
    STAGE_OVERVIEW: "Falha ao carregar overview",
    STAGE_CHOROPLETH: "Falha ao carregar choropleth",
    STAGE_TIMESERIES: "Falha ao carregar séries"
}

METADATA_ERROR_MESSAGE = "Falha ao carregar filtros"

# Placeholder for missing values in the dashboard
MISSING_VALUE = "–"
MISSING_LABEL = "—"

# Default visualization settings
DEFAULT_FIGURE_WIDTH = 8
DEFAULT_FIGURE_HEIGHT = 4

DEFAULT_COLOR_PALETTE = {
    "bar": "#3b82f6",        # Blue
    "line": "#facc15",       # Yellow
    "line_fill": "#facc15"
}

# Default configuration structure
DEFAULT_CONFIG = {
    "api": {
        "base_url": DEFAULT_API_URL,
        "timeout": DEFAULT_REQUEST_TIMEOUT
    },
    "refinement": {
        "max_attempts": DEFAULT_MAX_REFINEMENT_ATTEMPTS
    },
    "dashboard": {
        "table_row_limit": DEFAULT_TABLE_ROW_LIMIT
    },
    "ui": {
        "show_debug_info": False,
        "color_palette": DEFAULT_COLOR_PALETTE
    }
}
