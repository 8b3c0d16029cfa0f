"""Report payload schemas (the input contract of the rendering engine)"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class CurrencySettings(BaseModel):
    model_config = _CAMEL

    display_format: str = "code"  # symbol | code | both
    rounding: int = 2
    rounding_method: str = "standard"  # standard | up | down

    @field_validator("display_format", "rounding_method", mode="before")
    @classmethod
    def lower_case(cls, v):
        return v.lower() if isinstance(v, str) else v


class ReportPeriod(BaseModel):
    model_config = _CAMEL

    start_date: Optional[Union[datetime, str]] = None
    end_date: Optional[Union[datetime, str]] = None


class ReportMetadata(BaseModel):
    """Organization identity and presentation options. Every field is optional."""

    model_config = _CAMEL

    organization_name: Optional[str] = None
    vat_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    organization_id: Optional[str] = None
    currency: Optional[str] = None
    report_period: Optional[ReportPeriod] = None
    summary: Optional[Dict[str, Any]] = None
    currency_settings: Optional[CurrencySettings] = None
    logo_buffer: Optional[bytes] = None
    logo_url: Optional[str] = None
    filters: Optional[Dict[str, Any]] = None
    generated_at: Optional[Union[datetime, str]] = None
    generated_by: Optional[str] = None
    generated_by_name: Optional[str] = None

    @field_validator("currency", mode="before")
    @classmethod
    def upper_currency(cls, v):
        if isinstance(v, str):
            return v.strip().upper() or None
        return v


class ReportData(BaseModel):
    """A computed report: a type tag, its figures, and optional metadata."""

    model_config = _CAMEL

    type: str
    data: Union[List[Dict[str, Any]], Dict[str, Any], None] = None
    metadata: ReportMetadata = Field(default_factory=ReportMetadata)

    @field_validator("type", mode="before")
    @classmethod
    def normalize_type(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, v):
        return {} if v is None else v

    @property
    def is_tabular(self) -> bool:
        """True when data is a list of rows (the only shape discriminator)."""
        return isinstance(self.data, list)

    @property
    def rows(self) -> List[Dict[str, Any]]:
        return self.data if isinstance(self.data, list) else []

    @property
    def payload(self) -> Dict[str, Any]:
        return self.data if isinstance(self.data, dict) else {}

    @classmethod
    def coerce(cls, value: Any) -> "ReportData":
        """Accept either a ReportData or a plain mapping."""
        if isinstance(value, cls):
            return value
        return cls.model_validate(value)
