"""Schémas Reporting annuel / Yearly reporting schemas."""

from pydantic import BaseModel


class MonthlyData(BaseModel):
    month: int
    days: float
    revenue: float


class MonthlyClient(BaseModel):
    client_id: int
    client_name: str
    client_color: str | None
    days: float
    revenue: float


class MonthlyClientRevenue(BaseModel):
    month: int
    clients: list[MonthlyClient]


class ClientData(BaseModel):
    client_id: int
    client_name: str
    client_color: str | None
    currency: str
    days: float
    revenue: float  # devise du client / client's currency
    converted_revenue: float  # devise de base / base currency


class CompanyData(BaseModel):
    company_id: int
    company_name: str
    days: float
    converted_revenue: float


class PreviousYear(BaseModel):
    total_days: float
    total_revenue: float
    average_daily_rate: float
    client_count: int


class ReportingRead(BaseModel):
    year: int
    base_currency: str
    total_days: float
    total_revenue: float
    average_daily_rate: float
    working_days_in_year: int
    monthly_data: list[MonthlyData]
    monthly_client_revenue: list[MonthlyClientRevenue]
    client_data: list[ClientData]
    company_data: list[CompanyData]
    previous_year: PreviousYear | None
