from voicepos.schemas.base import CamelModel, Money


class PeriodStats(CamelModel):
    revenue: Money
    transactions: int


class StockSummary(CamelModel):
    total: int
    low_stock: int
    out_of_stock: int


class DashboardStats(CamelModel):
    today: PeriodStats
    weekly: PeriodStats
    monthly: PeriodStats
    products: StockSummary


class ChartPoint(CamelModel):
    bucket_key: str
    total_revenue: Money
    transaction_count: int
