"""
Raw flow → TradeFlowRecord normalisation.

Upstream payloads disagree on field names (Comtrade v1 vs. relays vs. the
synthetic generator); COLUMN_MAP lists the accepted spellings per canonical
field, first match wins. Numeric fields are parse-or-zero and records with a
non-positive trade value are dropped. Bad input shapes yield [] rather than
an error.
"""
import logging
import math
import re
from typing import Any, Dict, Iterable, List, Optional

from afritrade.schemas.schemas import TradeFlowRecord

logger = logging.getLogger("afritrade.transformer")

COLUMN_MAP: Dict[str, tuple] = {
    "reporter_code": ("reporterCode",),
    "reporter_name": ("reporterDesc", "reporterName"),
    "partner_code": ("partnerCode",),
    "partner_name": ("partnerDesc", "partnerName"),
    "year": ("period", "refYear", "year"),
    "trade_value": ("primaryValue", "tradeValue", "TradeValue"),
    "flow_direction": ("flowDesc",),
    "commodity_code": ("cmdCode", "commodityCode"),
    "commodity_name": ("cmdDesc", "commodityDesc"),
    "net_weight": ("netWgt", "netWeight"),
    "quantity": ("qty", "quantity"),
}

FLOW_CODES = {"X": "Export", "M": "Import"}

NUMERIC_PREFIX = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _first(raw: Dict[str, Any], names: Iterable[str]) -> Any:
    for name in names:
        value = raw.get(name)
        if value is not None and value != "":
            return value
    return None


def parse_float(value: Any) -> float:
    """parseFloat-or-zero: '12.5abc' → 12.5, junk/None/NaN → 0.0"""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        result = float(value)
    else:
        match = NUMERIC_PREFIX.match(str(value).strip())
        result = float(match.group()) if match else 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def parse_year(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        # period can be "2023" or "202301" for monthly data
        return int(str(value).strip()[:4])
    except ValueError:
        return None


def _flow_direction(raw: Dict[str, Any]) -> str:
    desc = _first(raw, COLUMN_MAP["flow_direction"])
    if desc:
        text = str(desc).strip()
        lowered = text.lower()
        if "export" in lowered:
            return "Export"
        if "import" in lowered:
            return "Import"
        return text
    code = str(raw.get("flowCode") or "").strip().upper()
    return FLOW_CODES.get(code, code)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def normalize_record(raw: Dict[str, Any]) -> Optional[TradeFlowRecord]:
    trade_value = parse_float(_first(raw, COLUMN_MAP["trade_value"]))
    if trade_value <= 0:
        return None

    return TradeFlowRecord(
        reporter_code=_text(_first(raw, COLUMN_MAP["reporter_code"])),
        reporter_name=_text(_first(raw, COLUMN_MAP["reporter_name"])),
        partner_code=_text(_first(raw, COLUMN_MAP["partner_code"])),
        partner_name=_text(_first(raw, COLUMN_MAP["partner_name"])),
        year=parse_year(_first(raw, COLUMN_MAP["year"])),
        trade_value=trade_value,
        flow_direction=_flow_direction(raw),
        commodity_code=_text(_first(raw, COLUMN_MAP["commodity_code"])) or "TOTAL",
        commodity_name=_text(_first(raw, COLUMN_MAP["commodity_name"])),
        net_weight=parse_float(_first(raw, COLUMN_MAP["net_weight"])),
        quantity=parse_float(_first(raw, COLUMN_MAP["quantity"])),
    )


def normalize(raw_flows: Any) -> List[TradeFlowRecord]:
    """Map raw flows to canonical records, dropping anything with trade_value <= 0."""
    if not isinstance(raw_flows, (list, tuple)):
        return []

    records: List[TradeFlowRecord] = []
    skipped = 0
    for raw in raw_flows:
        if not isinstance(raw, dict):
            skipped += 1
            continue
        record = normalize_record(raw)
        if record is None:
            skipped += 1
            continue
        records.append(record)

    if skipped:
        logger.debug(f"Dropped {skipped} invalid or zero-value flows")
    return records
