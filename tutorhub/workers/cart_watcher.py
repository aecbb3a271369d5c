"""Executable cart watcher: polls the cart API and logs expiry warnings."""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any

import httpx

from tutorhub.core.config import get_settings
from tutorhub.modules.cart.poller import CartRefreshPoller

logger = logging.getLogger(__name__)


class CartWatcher:
    """Keeps the dismissed-notification set between polls, as a client would."""

    def __init__(self, client: httpx.AsyncClient, dismiss_after_warning: bool = True) -> None:
        self.client = client
        self.dismiss_after_warning = dismiss_after_warning
        self.dismissed: set[str] = set()

    async def fetch(self) -> dict[str, Any]:
        response = await self.client.get("cart", params={"dismissed": sorted(self.dismissed)})
        response.raise_for_status()
        return response.json()

    def report(self, cart: dict[str, Any]) -> None:
        logger.info(
            "Cart: %s item(s), subtotal=%s discount=%s final=%s",
            cart["count"],
            cart["subtotal"],
            cart["discount"],
            cart["final_price"],
        )
        for notification in cart.get("notifications", []):
            logger.warning(
                "Lesson with %s at %s expires from cart at %s",
                notification["teacher_name"],
                notification["scheduled_time"],
                notification["expires_at"],
            )
            if self.dismiss_after_warning:
                self.dismissed.add(notification["id"])


async def main() -> None:
    """Run once or keep polling according to watcher mode."""
    settings = get_settings()
    logging.basicConfig(level=os.getenv("CART_WATCHER_LOG_LEVEL", settings.log_level))
    mode = os.getenv("CART_WATCHER_MODE", "once").strip().lower()
    base_url = os.getenv("CART_WATCHER_API_URL", f"http://localhost:8000{settings.api_prefix}").rstrip("/")
    token = os.environ["CART_WATCHER_ACCESS_TOKEN"]

    async with httpx.AsyncClient(
        base_url=f"{base_url}/",
        headers={"Authorization": f"Bearer {token}"},
        timeout=settings.functions_timeout_seconds,
    ) as client:
        watcher = CartWatcher(client)
        poller = CartRefreshPoller(
            watcher.fetch,
            interval_seconds=settings.cart_refresh_interval_seconds,
            on_result=watcher.report,
        )
        if mode == "once":
            await poller.run_once()
            return

        poller.start()
        try:
            await asyncio.Event().wait()
        finally:
            await poller.stop()


if __name__ == "__main__":
    asyncio.run(main())
