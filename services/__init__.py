"""
Services package for the Agro Dashboard application.

This package provides the client for the agricultural statistics API and the
errors it raises.
"""

from services.agro_stats_service import AgroStatsService
from services.exceptions import AgroDashboardError, FetchError, MetadataLoadError

__all__ = [
    'AgroStatsService',
    'AgroDashboardError',
    'FetchError',
    'MetadataLoadError'
]
