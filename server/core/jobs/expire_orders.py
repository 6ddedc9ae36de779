"""Periodic removal of pending orders that were never paid."""
import asyncio

import logfire

from server.core.service.ledger.order_ledger import OrderLedger


async def run_expiry_sweeper(ledger: OrderLedger, interval_seconds: float) -> None:
    """Sweep the order ledger every `interval_seconds` until cancelled."""
    logfire.info(f"Order expiry sweeper started, interval {interval_seconds}s")
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            ledger.sweep_expired()
        except Exception:
            # keep the loop alive, the next tick retries
            logfire.exception("Order expiry sweep failed")


def start_expiry_sweeper(ledger: OrderLedger, interval_seconds: float) -> asyncio.Task:
    return asyncio.create_task(run_expiry_sweeper(ledger, interval_seconds), name="order-expiry-sweeper")
