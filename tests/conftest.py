"""Shared fixtures for the dashboard tests."""
import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config.constants import UF_ALL
from models.data_models import Choropleth, Metadata, Overview, TimeSeries
from services.exceptions import FetchError


def overview_payload(value):
    return {
        "kpis": {"area_ha": 1500.0, "producao_t": 4200.0, "valor_mil_reais": 9800.5},
        "top_municipios": [{"nome": "Ribeirão Preto", "valor": value}, {"nome": "Franca", "valor": value}],
    }


def series_payload(value):
    return {"data": [{"ano": 2021, "valor": value}, {"ano": 2022, "valor": value}]}


CHOROPLETH_PAYLOAD = {
    "data": [
        {"municipio": "Ribeirão Preto", "uf": "SP", "area_ha": 100, "producao_t": 300, "valor_mil_reais": 900},
    ]
}


class FakeStatsService:
    """
    Stand-in for AgroStatsService.

    ``zero_when`` decides, per FilterState, whether the overview and series
    come back all zeros. Calls are recorded as (stage, state) tuples.
    """

    def __init__(self, zero_when=lambda state: False, fail_stage=None, metadata=None):
        self.zero_when = zero_when
        self.fail_stage = fail_stage
        self.metadata = metadata
        self.calls = []
        self.on_overview = None

    def _check(self, stage, state):
        self.calls.append((stage, state))
        if self.fail_stage == stage:
            raise FetchError(stage)

    def get_metadata(self):
        return self.metadata

    def get_overview(self, state):
        self._check("overview", state)
        if self.on_overview is not None:
            self.on_overview(state)
        return Overview.from_api(overview_payload(0 if self.zero_when(state) else 120.0))

    def get_choropleth(self, state):
        self._check("choropleth", state)
        return Choropleth.from_api(CHOROPLETH_PAYLOAD)

    def get_timeseries(self, state):
        self._check("timeseries", state)
        return TimeSeries.from_api(series_payload(0 if self.zero_when(state) else 75.0))

    def stages(self):
        return [stage for stage, _ in self.calls]


@pytest.fixture
def metadata():
    return Metadata.from_api({
        "anos": [2023, 2022, 2021],
        "ufs": list(UF_ALL),
        "culturas": ["Total", "Soja", "Milho"],
    })
