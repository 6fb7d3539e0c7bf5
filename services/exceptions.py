"""
Exceptions raised when the statistics API cannot be reached or answers badly.
"""

from config.constants import METADATA_ERROR_MESSAGE, STAGE_MESSAGES


class AgroDashboardError(Exception):
    """Base class for errors surfaced to the dashboard."""


class MetadataLoadError(AgroDashboardError):
    """The initial ``/filters`` call failed."""

    def __init__(self, message: str = METADATA_ERROR_MESSAGE):
        super().__init__(message)


class FetchError(AgroDashboardError):
    """
    One of the data calls failed.

    Attributes:
        stage (str): "overview", "choropleth" or "timeseries"
    """

    def __init__(self, stage: str):
        if stage not in STAGE_MESSAGES:
            raise ValueError(f"Unknown fetch stage: {stage}")
        self.stage = stage
        super().__init__(STAGE_MESSAGES[stage])
