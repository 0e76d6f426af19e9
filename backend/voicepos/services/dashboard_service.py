"""
Read-only dashboard rollups for one owner/cashier.

Revenue windows:
- today: store-local midnight to the next midnight
- weekly: rolling 7 days back from now
- monthly: calendar month to date (from the 1st, store-local)

Chart series bucket by store-local calendar day (week, month) or month (year).
"""
from collections import OrderedDict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from voicepos.core.dates import as_utc, day_bounds, month_start, shift_months, to_local, utc_now
from voicepos.models.product import Product
from voicepos.models.sale import Sale
from voicepos.services.invoice_service import to_money

CHART_PERIODS = ("week", "month", "year")


def revenue_between(db: Session, owner_id: int, start: datetime, end: datetime, end_inclusive: bool = True) -> dict:
    q = db.query(
        func.coalesce(func.sum(Sale.total), 0),
        func.count(Sale.id),
    ).filter(
        Sale.cashier_id == owner_id,
        Sale.created_at >= start,
    )
    q = q.filter(Sale.created_at <= end) if end_inclusive else q.filter(Sale.created_at < end)
    revenue, transactions = q.one()
    return {
        "revenue": to_money(revenue or 0),
        "transactions": int(transactions or 0),
    }


def sales_stats(db: Session, owner_id: int, now: Optional[datetime] = None) -> dict:
    now = as_utc(now) if now else utc_now()
    today_start, today_end = day_bounds(now)
    return {
        "today": revenue_between(db, owner_id, today_start, today_end, end_inclusive=False),
        "weekly": revenue_between(db, owner_id, now - timedelta(days=7), now),
        "monthly": revenue_between(db, owner_id, month_start(now), now),
    }


def stock_summary(db: Session, owner_id: int) -> dict:
    base = db.query(func.count(Product.id)).filter(Product.owner_id == owner_id)
    return {
        "total": base.scalar() or 0,
        "low_stock": base.filter(Product.stock <= Product.low_stock_threshold).scalar() or 0,
        "out_of_stock": base.filter(Product.stock == 0).scalar() or 0,
    }


def dashboard_stats(db: Session, owner_id: int, now: Optional[datetime] = None) -> dict:
    stats = sales_stats(db, owner_id, now)
    stats["products"] = stock_summary(db, owner_id)
    return stats


def _lookback_start(period: str, now: datetime) -> datetime:
    if period == "month":
        return shift_months(now, -1)
    if period == "year":
        return shift_months(now, -12)
    return now - timedelta(days=7)


def chart_series(db: Session, owner_id: int, period: str = "week", now: Optional[datetime] = None) -> List[dict]:
    """Revenue and transaction count per bucket, oldest bucket first.

    Unknown periods fall back to "week". Buckets without sales are omitted.
    """
    if period not in CHART_PERIODS:
        period = "week"
    now = as_utc(now) if now else utc_now()
    start = _lookback_start(period, now)
    key_format = "%Y-%m" if period == "year" else "%Y-%m-%d"

    rows = (
        db.query(Sale.created_at, Sale.total)
        .filter(
            Sale.cashier_id == owner_id,
            Sale.created_at >= start,
            Sale.created_at <= now,
        )
        .order_by(Sale.created_at.asc())
        .all()
    )

    buckets = OrderedDict()
    for created_at, total in rows:
        key = to_local(created_at).strftime(key_format)
        bucket = buckets.setdefault(key, {"total_revenue": Decimal("0.00"), "transaction_count": 0})
        bucket["total_revenue"] += to_money(total)
        bucket["transaction_count"] += 1

    return [
        {"bucket_key": key, **values}
        for key, values in sorted(buckets.items())
    ]
