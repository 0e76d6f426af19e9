import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest import mock

from tests.support import DatabaseTestCase, make_product, make_user
from voicepos.core import dates
from voicepos.core.config import settings
from voicepos.services import dashboard_service, sale_service

NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


class DashboardServiceTest(DatabaseTestCase, unittest.TestCase):
    def setUp(self):
        super().setUp()
        self.owner = make_user(self.db)
        self.milk = make_product(self.db, self.owner, name="milk", price="10.00", stock=100)

    def sell(self, quantity, at, owner=None, product=None):
        owner = owner or self.owner
        product = product or self.milk
        return sale_service.checkout(self.db, owner.id, [(product.id, quantity)], now=at)

    def seed_sales(self):
        self.sell(1, NOW - timedelta(hours=1))                           # today, 10
        self.sell(2, NOW - timedelta(days=3))                            # this week, 20
        self.sell(3, datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc))    # this month, 30
        self.sell(4, datetime(2026, 2, 20, 9, 0, tzinfo=timezone.utc))   # last month, 40
        self.sell(5, datetime(2025, 6, 10, 9, 0, tzinfo=timezone.utc))   # last year, 50

    def test_stock_summary(self):
        for i in range(7):
            make_product(self.db, self.owner, name=f"item {i}", stock=50)
        make_product(self.db, self.owner, name="eggs", stock=3)
        make_product(self.db, self.owner, name="tomato paste", stock=0)
        other = make_user(self.db, email="other@cornershop.com")
        make_product(self.db, other, name="empty", stock=0)

        summary = dashboard_service.stock_summary(self.db, self.owner.id)
        self.assertEqual(summary, {"total": 10, "low_stock": 2, "out_of_stock": 1})

    def test_revenue_windows(self):
        self.seed_sales()
        stats = dashboard_service.sales_stats(self.db, self.owner.id, now=NOW)
        self.assertEqual(stats["today"], {"revenue": Decimal("10.00"), "transactions": 1})
        self.assertEqual(stats["weekly"], {"revenue": Decimal("30.00"), "transactions": 2})
        self.assertEqual(stats["monthly"], {"revenue": Decimal("60.00"), "transactions": 3})

    def test_windows_are_owner_scoped(self):
        other = make_user(self.db, email="other@cornershop.com")
        tea = make_product(self.db, other, name="tea", price="5.00", stock=10)
        self.sell(1, NOW - timedelta(hours=1), owner=other, product=tea)

        stats = dashboard_service.dashboard_stats(self.db, self.owner.id, now=NOW)
        self.assertEqual(stats["today"]["transactions"], 0)
        self.assertEqual(stats["today"]["revenue"], Decimal("0.00"))
        self.assertEqual(stats["products"]["total"], 1)

    def test_week_chart(self):
        self.seed_sales()
        series = dashboard_service.chart_series(self.db, self.owner.id, "week", now=NOW)
        self.assertEqual(series, [
            {"bucket_key": "2026-03-12", "total_revenue": Decimal("20.00"), "transaction_count": 1},
            {"bucket_key": "2026-03-15", "total_revenue": Decimal("10.00"), "transaction_count": 1},
        ])

    def test_month_chart(self):
        self.seed_sales()
        series = dashboard_service.chart_series(self.db, self.owner.id, "month", now=NOW)
        self.assertEqual(
            [point["bucket_key"] for point in series],
            ["2026-02-20", "2026-03-02", "2026-03-12", "2026-03-15"],
        )

    def test_year_chart_groups_by_month(self):
        self.seed_sales()
        series = dashboard_service.chart_series(self.db, self.owner.id, "year", now=NOW)
        self.assertEqual(series, [
            {"bucket_key": "2025-06", "total_revenue": Decimal("50.00"), "transaction_count": 1},
            {"bucket_key": "2026-02", "total_revenue": Decimal("40.00"), "transaction_count": 1},
            {"bucket_key": "2026-03", "total_revenue": Decimal("60.00"), "transaction_count": 3},
        ])

    def test_unknown_period_falls_back_to_week(self):
        self.seed_sales()
        self.assertEqual(
            dashboard_service.chart_series(self.db, self.owner.id, "decade", now=NOW),
            dashboard_service.chart_series(self.db, self.owner.id, "week", now=NOW),
        )

    def test_buckets_follow_store_timezone(self):
        self.sell(1, datetime(2026, 3, 15, 2, 0, tzinfo=timezone.utc))
        dates.store_timezone.cache_clear()
        try:
            with mock.patch.object(settings, "STORE_TIMEZONE", "America/New_York"):
                series = dashboard_service.chart_series(self.db, self.owner.id, "week", now=NOW)
        finally:
            dates.store_timezone.cache_clear()
        self.assertEqual([point["bucket_key"] for point in series], ["2026-03-14"])


if __name__ == "__main__":
    unittest.main()
