"""
Query refinement controller for the Agro Dashboard application.

The controller owns the current filters and runs the fetch loop behind the
dashboard: overview, then choropleth, then (for a selected region) the time
series. When a region-scoped result is all zeros it relaxes one filter at a
time, in the order metric, crop, year, and fetches again. At most
``max_attempts`` relaxations happen over the lifetime of a controller.

User changes bump a generation counter; a cycle that finishes after such a
change is discarded instead of overwriting newer results.
"""

import dataclasses
import logging
from typing import Any, Optional

from config.constants import DEFAULT_MAX_REFINEMENT_ATTEMPTS, METRIC_ORDER, TOTAL_CROP
from models.data_models import (
    ControllerStatus,
    FilterState,
    Metadata,
    Overview,
    QueryResultBundle,
    TimeSeries
)
from services.exceptions import FetchError
from utils.data_processing import to_number

logger = logging.getLogger(__name__)

FILTER_FIELDS = frozenset(f.name for f in dataclasses.fields(FilterState))


def is_degenerate(overview: Optional[Overview], timeseries: Optional[TimeSeries]) -> bool:
    """
    Check whether a result carries no real data.

    Args:
        overview: Overview result; only the top municipalities are inspected
        timeseries: Time series result

    Returns:
        True when every top municipality value and every series value is zero.
        Missing and non-numeric values count as zero, and empty lists pass.
    """
    entities = overview.top_entities if overview else []
    points = timeseries.points if timeseries else []

    all_zero_top = all(to_number(e.value) == 0 for e in entities)
    all_zero_series = all(to_number(p.value) == 0 for p in points)
    return all_zero_top and all_zero_series


def next_relaxation(state: FilterState, metadata: Metadata) -> Optional[FilterState]:
    """
    Pick the next filters to try after a degenerate result.

    Exactly one field changes:
    1. the metric advances along METRIC_ORDER, unless it is already last;
    2. else the crop becomes the first listed crop other than the current one and "Total";
    3. else the year moves to the next (older) entry of the year list.

    Args:
        state: Filters that produced the degenerate result
        metadata: Available years and crops

    Returns:
        New FilterState, or None when no axis is left
    """
    try:
        index = METRIC_ORDER.index(state.metric)
    except ValueError:
        index = -1
    next_metric = METRIC_ORDER[min(len(METRIC_ORDER) - 1, index + 1)]
    if next_metric != state.metric:
        return dataclasses.replace(state, metric=next_metric)

    alt_crop = next((c for c in metadata.crops if c != state.crop and c != TOTAL_CROP), None)
    if alt_crop:
        return dataclasses.replace(state, crop=alt_crop)

    years = list(metadata.years)
    if state.year in years:
        position = years.index(state.year)
        if position < len(years) - 1:
            return dataclasses.replace(state, year=years[position + 1])

    return None


class _StaleCycle(Exception):
    """Raised inside a cycle whose filters were replaced while it was running."""


class RefinementController:
    """
    Fetch loop with automatic filter relaxation.

    Attributes:
        service: Data provider with get_overview/get_choropleth/get_timeseries
        metadata (Metadata): Filter options loaded at startup
        max_attempts (int): Relaxation budget for this controller's lifetime
        state (FilterState): Current filters
        attempts (int): Relaxations performed so far
        relaxed_last_refresh (int): Relaxations performed by the most recent refresh
        status (ControllerStatus): Outcome of the last loop
        result (QueryResultBundle): Latest fetched data
        error: Last FetchError, or None
        needs_refresh (bool): True when the filters changed since the last loop
    """

    def __init__(
        self,
        service: Any,
        metadata: Metadata,
        max_attempts: int = DEFAULT_MAX_REFINEMENT_ATTEMPTS,
        initial_state: Optional[FilterState] = None
    ):
        self.service = service
        self.metadata = metadata
        self.max_attempts = max_attempts
        self.state = initial_state if initial_state is not None else metadata.initial_state()
        self.attempts = 0
        self.relaxed_last_refresh = 0
        self.status = ControllerStatus.IDLE
        self.result = QueryResultBundle()
        self.error: Optional[FetchError] = None
        self.needs_refresh = True
        self._generation = 0

        logger.info(f"Refinement controller ready with filters {self.state}")

    @classmethod
    def from_service(cls, service: Any, max_attempts: int = DEFAULT_MAX_REFINEMENT_ATTEMPTS) -> "RefinementController":
        """
        Load metadata from the service and start from the default filters.

        Raises:
            MetadataLoadError: If the filter options cannot be loaded
        """
        return cls(service, service.get_metadata(), max_attempts=max_attempts)

    @property
    def budget_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts

    def update_filters(self, **changes: Any) -> FilterState:
        """
        Apply a user change to the filters.

        Any in-flight cycle becomes stale and a refresh is requested. Setting
        the same values again is a no-op.

        Args:
            **changes: Any of year, region, crop, metric

        Returns:
            The current FilterState

        Raises:
            ValueError: On an unknown filter name
        """
        unknown = set(changes) - FILTER_FIELDS
        if unknown:
            raise ValueError(f"Unknown filter(s): {', '.join(sorted(unknown))}")

        cleaned = {key: "" if value is None else str(value) for key, value in changes.items()}
        new_state = dataclasses.replace(self.state, **cleaned)
        self._apply(new_state)
        return self.state

    def _apply(self, new_state: FilterState) -> None:
        if new_state == self.state:
            return
        logger.info(f"Filters changed: {self.state} -> {new_state}")
        self.state = new_state
        self._generation += 1
        self.needs_refresh = True

    def refresh(self, state: Optional[FilterState] = None) -> QueryResultBundle:
        """
        Fetch data for the current filters, relaxing them while results are degenerate.

        Args:
            state: Optional new filters, applied like a user change first

        Returns:
            The result bundle (unchanged when year or crop is missing)

        Raises:
            FetchError: When a call fails; results of earlier stages are kept
        """
        if state is not None:
            self._apply(state)

        state = self.state
        if not state.is_queryable:
            logger.debug("Year or crop missing, nothing to fetch")
            self.status = ControllerStatus.IDLE
            self.needs_refresh = False
            return self.result

        generation = self._generation
        self.relaxed_last_refresh = 0

        while True:
            self.status = ControllerStatus.FETCHING
            self.error = None

            try:
                self._run_cycle(state, generation)
            except _StaleCycle:
                logger.warning(f"Discarding results for {state}: filters changed meanwhile")
                self.status = ControllerStatus.STALE
                return self.result
            except FetchError as e:
                logger.error(f"Fetch failed at stage '{e.stage}' for {state}")
                self.status = ControllerStatus.ERROR
                self.error = e
                self.needs_refresh = False
                raise

            next_state = self._next_state(state)
            if next_state is None:
                break

            self.attempts += 1
            self.relaxed_last_refresh += 1
            logger.info(
                f"Degenerate result, relaxing filters (attempt {self.attempts}/{self.max_attempts}): "
                f"{state} -> {next_state}"
            )
            state = next_state
            self.state = state
            self.status = ControllerStatus.DEGENERATE_RETRY

        self.needs_refresh = False
        return self.result

    def _read(self, fetch, state: FilterState, generation: int):
        try:
            value = fetch(state)
        except FetchError:
            if generation != self._generation:
                raise _StaleCycle()
            raise
        if generation != self._generation:
            raise _StaleCycle()
        return value

    def _run_cycle(self, state: FilterState, generation: int) -> None:
        """
        Overview -> choropleth -> time series, storing each stage as it arrives.

        The bundle switches to the new filters only once their overview has
        arrived; later stages left over from other filters are cleared then.
        """
        overview = self._read(self.service.get_overview, state, generation)
        if self.result.state != state:
            self.result.state = state
            self.result.choropleth = None
            self.result.timeseries = None
        self.result.overview = overview

        self.result.choropleth = self._read(self.service.get_choropleth, state, generation)

        if state.is_region_scoped:
            self.result.timeseries = self._read(self.service.get_timeseries, state, generation)
        else:
            self.result.timeseries = None

    def _next_state(self, state: FilterState) -> Optional[FilterState]:
        """Decide the outcome of a finished cycle and return the filters for the next one, if any."""
        if not state.is_region_scoped or not is_degenerate(self.result.overview, self.result.timeseries):
            self.status = ControllerStatus.SUCCESS
            return None

        if self.budget_exhausted:
            logger.warning(f"Degenerate result for {state}, refinement budget exhausted")
            self.status = ControllerStatus.DEGENERATE_FINAL
            return None

        next_state = next_relaxation(state, self.metadata)
        if next_state is None:
            logger.warning(f"Degenerate result for {state}, no filter left to relax")
            self.status = ControllerStatus.DEGENERATE_FINAL
        return next_state
