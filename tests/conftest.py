import pytest

from afritrade.core.config import Settings
from afritrade.schemas.schemas import TradeFlowRecord


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def test_settings():
    return Settings(
        comtrade_base_url="https://comtrade.test/data/v1/get",
        world_bank_base_url="https://worldbank.test/v2",
        unctad_base_url="https://unctad.test/api/v1",
        boundaries_url="https://geo.test/world.geojson",
        batch_delay_seconds=0,
        data_source="live",
        synthetic_seed=7,
    )


def make_record(reporter="566", partner="288", value=1_000.0, year=2022, flow="Export"):
    return TradeFlowRecord(
        reporter_code=reporter,
        partner_code=partner,
        year=year,
        trade_value=value,
        flow_direction=flow,
    )
