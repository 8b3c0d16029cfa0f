"""Centralized Pydantic schemas for report payloads"""

from .report import CurrencySettings, ReportData, ReportMetadata, ReportPeriod

__all__ = [
    "CurrencySettings",
    "ReportData",
    "ReportMetadata",
    "ReportPeriod",
]
