from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Upstream statistical APIs
    comtrade_base_url: str = "https://comtradeapi.un.org/data/v1/get"
    un_comtrade_api_key: str = ""
    world_bank_base_url: str = "https://api.worldbank.org/v2"
    unctad_base_url: str = "https://unctadstat-api.unctad.org/api/v1"
    boundaries_url: str = (
        "https://raw.githubusercontent.com/holtzy/D3-graph-gallery/master/DATA/world.geojson"
    )

    # Relay for environments that cannot reach Comtrade directly
    cors_proxy_url: str = "https://api.allorigins.win/raw"
    use_cors_proxy: bool = False
    user_agent: str = "African-Trade-Dashboard/1.0"
    request_timeout: float = 30.0

    # Cache
    cache_expiry_hours: float = 24.0

    # Batch fetching (simple outbound rate limiting)
    batch_size: int = 5
    batch_delay_seconds: float = 1.0

    # "live" = Comtrade with synthetic fallback, "synthetic" = generator only
    data_source: str = "live"
    synthetic_seed: Optional[int] = None

    top_routes_limit: int = 10
    refresh_interval_hours: float = 6.0

    log_level: str = "INFO"

    @property
    def cache_expiry_seconds(self) -> float:
        return self.cache_expiry_hours * 60 * 60

    class Config:
        env_file = ".env"


settings = Settings()
