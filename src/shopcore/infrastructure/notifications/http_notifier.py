"""Notifier that POSTs the e-mail payload to the order e-mail endpoint."""

from __future__ import annotations

import httpx

from shopcore.application.notifications import Notifier, OrderEmail


class HttpNotifier(Notifier):

    def __init__(
        self,
        url: str,
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._timeout = timeout
        self._transport = transport

    async def send(self, email: OrderEmail) -> None:
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.post(
                self._url, json=email.to_payload(), headers=self._headers
            )
            resp.raise_for_status()
