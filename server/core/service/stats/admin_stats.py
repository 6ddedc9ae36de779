"""Read-only aggregation over the redemption ledger."""
from datetime import datetime, timedelta
from typing import Iterable

from server.core.models.api_models import (
    DailyBucket,
    PackageStats,
    PaymentCountResponse,
    RecentPayment,
    StatsResponse,
)
from server.core.models.order_models import RedemptionRecord


def compute_stats(records: Iterable[RedemptionRecord], now: datetime, days: int = 7,
                  recent: int = 10) -> StatsResponse:
    """
    Totals, per-package counts and revenue, a `days`-long histogram of
    completions by calendar day (oldest first, days without sales included)
    and the `recent` newest purchases.
    """
    records = list(records)

    packages: dict[str, PackageStats] = {}
    for record in records:
        stats = packages.setdefault(record.package_id, PackageStats())
        stats.count += 1
        stats.revenue += record.amount

    today = now.date()
    buckets = {
        (today - timedelta(days=offset)).isoformat(): DailyBucket(date=(today - timedelta(days=offset)).isoformat())
        for offset in range(days - 1, -1, -1)
    }
    for record in records:
        bucket = buckets.get(record.completed_at.astimezone(now.tzinfo).date().isoformat())
        if bucket is not None:
            bucket.count += 1
            bucket.revenue += record.amount

    newest = sorted(records, key=lambda r: r.completed_at, reverse=True)[:recent]

    return StatsResponse(
        total_payments=len(records),
        total_downloads=sum(1 for r in records if r.downloaded),
        total_revenue=sum(r.amount for r in records),
        packages=packages,
        daily_payments=list(buckets.values()),
        recent_payments=[
            RecentPayment(
                email=r.customer.email,
                full_name=r.customer.full_name,
                package_id=r.package_id,
                amount=r.amount,
                completed_at=r.completed_at,
                downloaded=r.downloaded,
                downloaded_at=r.downloaded_at,
            )
            for r in newest
        ],
    )


def payment_count(records: Iterable[RedemptionRecord]) -> PaymentCountResponse:
    records = list(records)
    return PaymentCountResponse(
        total_payments=len(records),
        total_downloads=sum(1 for r in records if r.downloaded),
        total_revenue=sum(r.amount for r in records),
    )
