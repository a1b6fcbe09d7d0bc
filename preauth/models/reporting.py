"""Reporting models for the dashboard and exports."""

from typing import List
from pydantic import BaseModel, Field


class PayerCount(BaseModel):
    payer: str
    count: int


class ProcedureCount(BaseModel):
    procedure: str
    count: int


class MonthlyTrend(BaseModel):
    month: str = Field(..., description="Month label, e.g. 'Jan 2024'")
    requests: int
    minutes_saved: int


class ReportSummary(BaseModel):
    """KPI summary over an organization's requests."""
    requests_this_week: int = Field(..., ge=0)
    avg_turnaround_days: float = Field(..., ge=0.0, description="Mean days from creation to decision")
    first_pass_clean_rate: int = Field(..., ge=0, le=100, description="Percent of drafts with no missing fields")
    total_requests: int = Field(..., ge=0)
    pending_requests: int = Field(..., ge=0)
    total_minutes_saved: int = Field(..., ge=0)
    requests_by_payer: List[PayerCount] = Field(default_factory=list)
    requests_by_procedure: List[ProcedureCount] = Field(default_factory=list)
    monthly_trends: List[MonthlyTrend] = Field(default_factory=list)
