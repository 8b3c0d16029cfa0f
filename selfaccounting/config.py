from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Product identity (used in footers and as the logo placeholder)
    app_name: str = "SelfAccounting.AI"
    app_logo_text: str = "selfAccounting.AI"

    # Fallbacks when report metadata omits them
    default_organization_name: str = "SmartExpense UAE"
    default_currency: str = "AED"

    # Logo resolution
    logo_fetch_timeout: float = 10.0  # seconds
    max_logo_size: int = 5 * 1024 * 1024  # 5MB

    # Print layout (points, A4)
    pdf_page_margin: float = 50.0
    pdf_bottom_margin: float = 80.0

    # Branding directory override (defaults to <project>/branding)
    brand_dir: Optional[str] = None

    @field_validator("default_currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        """Currency codes are always upper-case ISO 4217"""
        return v.strip().upper() or "AED"

    @field_validator("pdf_bottom_margin", "pdf_page_margin")
    @classmethod
    def non_negative_margin(cls, v: float) -> float:
        if v < 0:
            raise ValueError("margins must be >= 0")
        return v

    class Config:
        env_file = ".env"
        env_prefix = "REPORTS_"
        case_sensitive = False


settings = Settings()
