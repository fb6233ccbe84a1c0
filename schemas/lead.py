from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils import parse_date_bound


class LeadSource(str, Enum):
    demo = "demo"
    contact = "contact"
    roi = "roi"


SOURCE_FILTER_VALUES = ("all", "demo", "contact", "roi")


class Lead(BaseModel):
    """One lead from any of the three intake forms. Keyed by (source, id)."""

    id: int
    source: LeadSource
    name: str
    email: str
    phone: Optional[str] = None
    company: Optional[str] = None
    hotel_size: Optional[int] = None
    message: Optional[str] = None
    detail: str = ""
    integration_type: Optional[str] = None
    position: Optional[str] = None
    form_type: Optional[str] = None

    # roi only
    calculated_roi: Optional[float] = None
    current_revenue: Optional[float] = None
    monthly_savings: Optional[float] = None
    annual_revenue: Optional[float] = None

    # contact only
    responded_at: Optional[datetime] = None

    created_at: datetime
    is_new: bool = False

    data_processing_consent: bool = False
    marketing_consent: bool = False


class LeadFilters(BaseModel):
    """Query for the unified leads list.

    Invalid values are coerced instead of rejected: unknown source means "all",
    unknown sort direction means "desc", page < 1 means page 1 and a bad
    page size falls back to the service default.
    """

    model_config = ConfigDict(populate_by_name=True)

    source: str = "all"
    date_from: Optional[datetime] = Field(None, alias="dateFrom")
    date_to: Optional[datetime] = Field(None, alias="dateTo")
    search_term: Optional[str] = Field(None, alias="searchTerm")
    show_responded: bool = Field(True, alias="showResponded")
    sort_dir: str = Field("desc", alias="sortDir")
    page: int = 1
    page_size: Optional[int] = Field(None, alias="pageSize")

    @field_validator("source", mode="before")
    @classmethod
    def _source(cls, v: Any) -> str:
        value = str(v or "all").strip().lower()
        return value if value in SOURCE_FILTER_VALUES else "all"

    @field_validator("date_from", "date_to", mode="before")
    @classmethod
    def _date_bound(cls, v: Any) -> Optional[datetime]:
        return parse_date_bound(v)

    @field_validator("show_responded", mode="before")
    @classmethod
    def _show_responded(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        value = str(v or "").strip().lower()
        if value in ("false", "0", "no", "off"):
            return False
        # anything else, including garbage, keeps the default
        return True

    @field_validator("sort_dir", mode="before")
    @classmethod
    def _sort_dir(cls, v: Any) -> str:
        return "asc" if str(v or "").strip().lower() == "asc" else "desc"

    @field_validator("page", mode="before")
    @classmethod
    def _page(cls, v: Any) -> int:
        try:
            page = int(v)
        except (TypeError, ValueError):
            return 1
        return max(page, 1)

    @field_validator("page_size", mode="before")
    @classmethod
    def _page_size(cls, v: Any) -> Optional[int]:
        try:
            size = int(v)
        except (TypeError, ValueError):
            return None
        return size if size > 0 else None


class LeadsPage(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    items: List[Lead]
    total: int
    page: int
    page_size: int = Field(..., alias="pageSize")


class DailyLeadCount(BaseModel):
    date: str  # YYYY-MM-DD, UTC
    count: int


class LeadStats(BaseModel):
    total_leads: int
    new_leads: int
    by_day: List[DailyLeadCount]
    latest: List[Lead]
