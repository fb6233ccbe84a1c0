"""Map raw rows of the three lead tables onto the unified ``Lead`` shape.

Each source has an entry in ``SOURCE_MAPPINGS`` (backing table and the column
aliases seen across form revisions) and one normalizer function. Null and
missing columns are treated the same way.

Rows with no readable timestamp get the processing time as ``created_at``.
That puts malformed legacy rows at the top of the list and marks them new;
it is a known compromise, not something callers should rely on.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from schemas.lead import Lead, LeadSource
from utils import parse_timestamp

NEW_LEAD_WINDOW = timedelta(hours=24)
DETAIL_MAX_LENGTH = 100


@dataclass(frozen=True)
class SourceMapping:
    source: LeadSource
    table: str
    timestamp_fields: Tuple[str, ...]
    company_fields: Tuple[str, ...]


SOURCE_MAPPINGS: Dict[LeadSource, SourceMapping] = {
    LeadSource.demo: SourceMapping(
        source=LeadSource.demo,
        table="demo_requests",
        timestamp_fields=("submitted_at", "created_at"),
        company_fields=("hotel_name", "company"),
    ),
    LeadSource.contact: SourceMapping(
        source=LeadSource.contact,
        table="contact_forms",
        timestamp_fields=("created_at", "submitted_at"),
        company_fields=("company", "hotel_name"),
    ),
    LeadSource.roi: SourceMapping(
        source=LeadSource.roi,
        table="roi_calculations",
        timestamp_fields=("submitted_at", "created_at"),
        company_fields=("hotel_name", "company"),
    ),
}

Row = Mapping[str, Any]


def _first(row: Row, fields: Tuple[str, ...]) -> Any:
    for field in fields:
        value = row.get(field)
        if value is not None and value != "":
            return value
    return None


def _text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(n) or math.isinf(n) else n


def _integer(value: Any) -> Optional[int]:
    n = _number(value)
    return None if n is None else int(n)


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "t", "1", "yes")
    return bool(value)


def _format_number(n: float) -> str:
    return str(int(n)) if n.is_integer() else str(n)


def _truncate(s: str) -> str:
    return s[:DETAIL_MAX_LENGTH]


def _common_fields(mapping: SourceMapping, row: Row, now: datetime, window: timedelta) -> Dict[str, Any]:
    created_at = parse_timestamp(_first(row, mapping.timestamp_fields)) or now
    return {
        "id": int(row.get("id") or 0),
        "source": mapping.source,
        "name": _text(_first(row, ("name",))) or "Anonymous",
        "email": _text(row.get("email")) or "",
        "phone": _text(row.get("phone")),
        "company": _text(_first(row, mapping.company_fields)),
        "created_at": created_at,
        "is_new": (now - created_at) < window,
        "data_processing_consent": _flag(row.get("data_processing_consent")),
        "marketing_consent": _flag(row.get("marketing_consent")),
    }


def normalize_demo(row: Row, now: datetime, window: timedelta = NEW_LEAD_WINDOW) -> Lead:
    form_type = _text(row.get("form_type"))
    return Lead(
        **_common_fields(SOURCE_MAPPINGS[LeadSource.demo], row, now, window),
        message=_text(row.get("message")),
        position=_text(row.get("position")),
        form_type=form_type,
        detail=_truncate(form_type or ""),
    )


def normalize_contact(row: Row, now: datetime, window: timedelta = NEW_LEAD_WINDOW) -> Lead:
    return Lead(
        **_common_fields(SOURCE_MAPPINGS[LeadSource.contact], row, now, window),
        message=_text(row.get("message")),
        position=_text(row.get("position")),
        integration_type=_text(row.get("integration_type")),
        responded_at=parse_timestamp(row.get("responded_at")),
        detail=_truncate(_text(row.get("subject")) or ""),
    )


def normalize_roi(row: Row, now: datetime, window: timedelta = NEW_LEAD_WINDOW) -> Lead:
    current_revenue = _number(row.get("current_revenue"))
    return Lead(
        **_common_fields(SOURCE_MAPPINGS[LeadSource.roi], row, now, window),
        hotel_size=_integer(row.get("hotel_size")),
        current_revenue=current_revenue,
        calculated_roi=_number(row.get("calculated_roi")),
        monthly_savings=_number(row.get("monthly_savings")),
        annual_revenue=_number(row.get("annual_revenue")),
        detail=_truncate(f"ROI: {_format_number(current_revenue or 0.0)}"),
    )


NORMALIZERS: Dict[LeadSource, Callable[..., Lead]] = {
    LeadSource.demo: normalize_demo,
    LeadSource.contact: normalize_contact,
    LeadSource.roi: normalize_roi,
}


def normalize_lead(
    source: LeadSource | str,
    row: Row,
    now: Optional[datetime] = None,
    window: timedelta = NEW_LEAD_WINDOW,
) -> Lead:
    """Normalize one raw row of ``source``; ``is_new`` is relative to ``now``."""
    now = now or datetime.now(timezone.utc)
    return NORMALIZERS[LeadSource(source)](row, now, window)
