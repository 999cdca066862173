from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Tuple


# ─── Trade Flow Schemas ───

class TradeFlowRecord(BaseModel):
    reporter_code: str
    reporter_name: str = ""
    partner_code: str
    partner_name: str = ""
    year: Optional[int] = None
    trade_value: float = Field(gt=0)
    flow_direction: str  # "Export" or "Import"
    commodity_code: str = "TOTAL"
    commodity_name: str = ""
    net_weight: float = 0.0
    quantity: float = 0.0


# ─── Aggregate Schemas ───

class Route(BaseModel):
    route: str  # "{reporter_code}-{partner_code}"
    reporter_code: str
    partner_code: str
    reporter: str
    partner: str
    value: float
    formatted_value: str


class AggregateStats(BaseModel):
    total_intra_regional_value: float = 0.0
    total_value: float = 0.0
    intra_regional_percentage: float = 0.0
    top_routes: List[Route] = Field(default_factory=list)
    growth_rate_percent: float = 0.0
    # (previous, current) years behind growth_rate_percent
    growth_years: Optional[Tuple[int, int]] = None


class DashboardSnapshot(BaseModel):
    year: int
    trade_flows: List[TradeFlowRecord]
    stats: AggregateStats
    using_fallback: bool
    degraded_reporters: List[str] = Field(default_factory=list)
    failed_reporters: List[str] = Field(default_factory=list)
    loaded_at: datetime


# ─── Side Data Schemas ───

class EconomicIndicator(BaseModel):
    value: Optional[float] = None
    date: Optional[str] = None
    country: Optional[Dict[str, Any]] = None


class BoundaryCollection(BaseModel):
    type: str = "FeatureCollection"
    features: List[Dict[str, Any]]
