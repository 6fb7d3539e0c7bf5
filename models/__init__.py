"""
Data models package for the Agro Dashboard application.
"""

from models.data_models import (
    Choropleth,
    ChoroplethRow,
    ControllerStatus,
    FilterState,
    Kpis,
    Metadata,
    Overview,
    QueryResultBundle,
    TimeSeries,
    TimeSeriesPoint,
    TopEntity
)

__all__ = [
    'Choropleth',
    'ChoroplethRow',
    'ControllerStatus',
    'FilterState',
    'Kpis',
    'Metadata',
    'Overview',
    'QueryResultBundle',
    'TimeSeries',
    'TimeSeriesPoint',
    'TopEntity'
]
