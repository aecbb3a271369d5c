from __future__ import annotations

from uuid import uuid4

import httpx
import pytest

from tutorhub.workers.cart_watcher import CartWatcher


@pytest.mark.asyncio
async def test_watcher_sends_dismissed_ids_after_warning(caplog: pytest.LogCaptureFixture) -> None:
    item_id = str(uuid4())
    seen_params: list[list[str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen_params.append(request.url.params.get_list("dismissed"))
        return httpx.Response(
            200,
            json={
                "count": 1,
                "subtotal": 7.5,
                "discount": 0,
                "final_price": 7.5,
                "notifications": [
                    {
                        "id": item_id,
                        "teacher_name": "Ustadha Amina",
                        "scheduled_time": "2026-10-20T09:00:00Z",
                        "expires_at": "2026-10-19T12:04:00Z",
                    }
                ],
            },
        )

    async with httpx.AsyncClient(base_url="http://api.test/api/v1/", transport=httpx.MockTransport(handler)) as client:
        watcher = CartWatcher(client)
        watcher.report(await watcher.fetch())
        await watcher.fetch()

    assert seen_params == [[], [item_id]]
    assert watcher.dismissed == {item_id}
    assert "expires from cart" in caplog.text
