"""
Statistics API service for the Agro Dashboard application.

This module provides a service class for the four read endpoints of the
agricultural statistics API: filter metadata, overview KPIs, per-municipality
choropleth rows and yearly time series.
"""

import requests
import logging
from typing import Any, Dict, Optional

from config.constants import (
    CHOROPLETH_ENDPOINT,
    DEFAULT_API_URL,
    DEFAULT_REQUEST_TIMEOUT,
    FILTERS_ENDPOINT,
    OVERVIEW_ENDPOINT,
    STAGE_CHOROPLETH,
    STAGE_OVERVIEW,
    STAGE_TIMESERIES,
    TIMESERIES_ENDPOINT
)
from models.data_models import Choropleth, FilterState, Metadata, Overview, TimeSeries
from services.exceptions import FetchError, MetadataLoadError

# Set up logger
logger = logging.getLogger(__name__)

class AgroStatsService:
    """
    Service for the agricultural statistics API.

    This class provides methods to:
    - Load the available years, regions and crops
    - Fetch overview KPIs and the top municipalities
    - Fetch per-municipality rows for the table
    - Fetch the yearly series of one region

    Nothing is cached: every call goes to the API.

    Attributes:
        base_url (str): Base URL of the API, without a trailing slash
        timeout (float): Timeout in seconds for each request
        session (requests.Session): HTTP session used for all requests
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the statistics service.

        Args:
            base_url: Base URL of the API
            timeout: Timeout in seconds for each request
            session: Optional pre-built session (tests pass a stub)
        """
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

        logger.info(f"Initialized statistics service with base URL: {self.base_url}")

    def __enter__(self) -> "AgroStatsService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    @staticmethod
    def _clean_params(params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """Drop empty optional parameters so they never reach the query string."""
        return {key: value for key, value in (params or {}).items() if value not in (None, "")}

    def _make_request(self, path: str, params: Optional[Dict] = None) -> Any:
        """
        Make a GET request to the API and decode the JSON body.

        Args:
            path: Endpoint path, e.g. "/filters"
            params: Optional query parameters; empty values are omitted

        Returns:
            The decoded JSON body

        Raises:
            requests.RequestException: If the request fails or the status is not 2xx
            ValueError: If the body is not valid JSON
        """
        url = f"{self.base_url}{path}"
        query = self._clean_params(params)
        logger.debug(f"GET {url} params={query}")

        try:
            response = self.session.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()  # Raise exception for 4XX/5XX responses
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Error making request to {url}: {str(e)}")
            raise

    def _fetch(self, stage: str, path: str, params: Dict[str, Any]) -> Any:
        try:
            return self._make_request(path, params)
        except (requests.RequestException, ValueError) as e:
            raise FetchError(stage) from e

    def get_metadata(self) -> Metadata:
        """
        Load the filter options.

        Returns:
            Metadata built from the ``/filters`` response

        Raises:
            MetadataLoadError: If the request fails
        """
        logger.info("Loading filter metadata")
        try:
            payload = self._make_request(FILTERS_ENDPOINT)
        except (requests.RequestException, ValueError) as e:
            raise MetadataLoadError() from e

        metadata = Metadata.from_api(payload)
        logger.info(
            f"Loaded metadata: {len(metadata.years)} years, "
            f"{len(metadata.regions)} regions, {len(metadata.crops)} crops"
        )
        return metadata

    def get_overview(self, state: FilterState) -> Overview:
        """
        Fetch KPIs and the top municipalities.

        Args:
            state: Current filters; region and crop are optional here

        Returns:
            Overview

        Raises:
            FetchError: With stage "overview"
        """
        payload = self._fetch(STAGE_OVERVIEW, OVERVIEW_ENDPOINT, {
            'ano': state.year,
            'uf': state.region,
            'cultura': state.crop
        })
        return Overview.from_api(payload)

    def get_choropleth(self, state: FilterState) -> Choropleth:
        """
        Fetch per-municipality rows for the selected metric.

        Raises:
            FetchError: With stage "choropleth"
        """
        payload = self._fetch(STAGE_CHOROPLETH, CHOROPLETH_ENDPOINT, {
            'ano': state.year,
            'uf': state.region,
            'cultura': state.crop,
            'variavel': state.metric
        })
        return Choropleth.from_api(payload)

    def get_timeseries(self, state: FilterState) -> TimeSeries:
        """
        Fetch the yearly series of the selected region. The year filter is ignored.

        Raises:
            FetchError: With stage "timeseries"
        """
        payload = self._fetch(STAGE_TIMESERIES, TIMESERIES_ENDPOINT, {
            'uf': state.region,
            'cultura': state.crop,
            'variavel': state.metric
        })
        return TimeSeries.from_api(payload)
