"""
Data models for the Agro Dashboard application.

This module provides data classes for the filter state, the metadata loaded at
startup and the three result shapes returned by the statistics API, so the
rest of the application never handles raw JSON.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from config.constants import (
    DEFAULT_REGION,
    METRIC_ORDER,
    MIN_REGION_COUNT,
    TOTAL_CROP,
    UF_ALL
)


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def _as_options(value: Any) -> Tuple[str, ...]:
    """Stringify a list of filter options, skipping null and blank entries."""
    return tuple(str(item) for item in _as_list(value) if item is not None and str(item).strip())


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


@dataclass(frozen=True)
class FilterState:
    """Current query filters. Empty strings mean "not selected"."""

    year: str = ""
    region: str = ""
    crop: str = ""
    metric: str = METRIC_ORDER[0]

    @property
    def is_queryable(self) -> bool:
        """Year and crop are required before anything is fetched."""
        return bool(self.year) and bool(self.crop)

    @property
    def is_region_scoped(self) -> bool:
        return bool(self.region)


@dataclass(frozen=True)
class Metadata:
    """Filter options offered by the API, loaded once per session."""

    years: Tuple[str, ...] = ()
    regions: Tuple[str, ...] = ()
    crops: Tuple[str, ...] = ()

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Metadata":
        """
        Build metadata from a ``/filters`` response.

        Empty region codes are dropped, and a list with fewer than
        ``MIN_REGION_COUNT`` entries is replaced by the canonical state list.

        Args:
            payload: Decoded JSON body

        Returns:
            Metadata instance
        """
        payload = _as_dict(payload)
        regions = [uf for uf in _as_list(payload.get('ufs')) if uf]
        if len(regions) < MIN_REGION_COUNT:
            regions = list(UF_ALL)

        return cls(
            years=_as_options(payload.get('anos')),
            regions=tuple(str(uf) for uf in regions),
            crops=_as_options(payload.get('culturas'))
        )

    def initial_state(self) -> FilterState:
        """
        Pick the filters the dashboard opens with.

        Returns:
            FilterState with the most recent year, SP (or the first region)
            and the first crop that is not the "Total" aggregate
        """
        year = self.years[0] if self.years else ""

        if DEFAULT_REGION in self.regions:
            region = DEFAULT_REGION
        else:
            region = self.regions[0] if self.regions else ""

        crop = next((c for c in self.crops if c != TOTAL_CROP), None)
        if crop is None:
            crop = self.crops[0] if self.crops else ""

        return FilterState(year=year, region=region, crop=crop, metric=METRIC_ORDER[0])


@dataclass
class Kpis:
    """Headline totals for the selected year, region and crop."""

    area_ha: Optional[float] = None
    producao_t: Optional[float] = None
    valor_mil_reais: Optional[float] = None


@dataclass
class TopEntity:
    """A ranked municipality. ``value`` keeps whatever the API sent."""

    name: Optional[str]
    value: Any


@dataclass
class Overview:
    """KPIs plus the ranked municipality list."""

    kpis: Kpis = field(default_factory=Kpis)
    top_entities: List[TopEntity] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Overview":
        payload = _as_dict(payload)
        kpis = _as_dict(payload.get('kpis'))
        entities = [
            TopEntity(name=item.get('nome'), value=item.get('valor'))
            for item in map(_as_dict, _as_list(payload.get('top_municipios')))
        ]
        return cls(
            kpis=Kpis(
                area_ha=kpis.get('area_ha'),
                producao_t=kpis.get('producao_t'),
                valor_mil_reais=kpis.get('valor_mil_reais')
            ),
            top_entities=entities
        )


@dataclass
class ChoroplethRow:
    """Per-municipality totals."""

    municipality: Optional[str] = None
    region: Optional[str] = None
    area_ha: Any = None
    producao_t: Any = None
    valor_mil_reais: Any = None


@dataclass
class Choropleth:
    rows: List[ChoroplethRow] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Choropleth":
        payload = _as_dict(payload)
        rows = [
            ChoroplethRow(
                municipality=item.get('municipio'),
                region=item.get('uf'),
                area_ha=item.get('area_ha'),
                producao_t=item.get('producao_t'),
                valor_mil_reais=item.get('valor_mil_reais')
            )
            for item in map(_as_dict, _as_list(payload.get('data')))
        ]
        return cls(rows=rows)


@dataclass
class TimeSeriesPoint:
    year: Any
    value: Any


@dataclass
class TimeSeries:
    """Yearly values for one region, crop and metric."""

    points: List[TimeSeriesPoint] = field(default_factory=list)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "TimeSeries":
        payload = _as_dict(payload)
        points = [
            TimeSeriesPoint(year=item.get('ano'), value=item.get('valor'))
            for item in map(_as_dict, _as_list(payload.get('data')))
        ]
        return cls(points=points)


@dataclass
class QueryResultBundle:
    """Everything the dashboard renders, plus the filters it was fetched for."""

    state: Optional[FilterState] = None
    overview: Optional[Overview] = None
    choropleth: Optional[Choropleth] = None
    timeseries: Optional[TimeSeries] = None


class ControllerStatus(Enum):
    """Where the refinement controller is in its fetch loop."""

    IDLE = "idle"
    FETCHING = "fetching"
    SUCCESS = "success"
    DEGENERATE_RETRY = "degenerate_retry"
    DEGENERATE_FINAL = "degenerate_final"
    ERROR = "error"
    STALE = "stale"
