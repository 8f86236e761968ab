"""
HttpReleaser - payouts through an external custody service.

Posts a JSON payout request and treats any 2xx answer whose body does not
report a failed status as a completed release.
"""

from __future__ import annotations

import uuid
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import httpx

from omnivault.core.exceptions import ConfigurationError
from omnivault.core.logging import get_logger
from omnivault.protocols.base import FundReleaser, ReleaseResult

if TYPE_CHECKING:
    from omnivault.core.config import VaultConfig

FAILED_STATUSES = frozenset({"failed", "rejected", "denied", "cancelled"})


class HttpReleaser(FundReleaser):
    """Releaser backed by an HTTP payout endpoint."""

    def __init__(
        self,
        payout_url: str,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize HttpReleaser.

        Args:
            payout_url: Endpoint receiving payout requests
            timeout: Request timeout in seconds
            headers: Extra headers sent with every request (e.g. auth)
            client: Pre-built client; not closed by this releaser
        """
        if not payout_url:
            raise ConfigurationError("payout_url is required for HttpReleaser")
        self._payout_url = payout_url
        self._timeout = timeout
        self._headers = dict(headers or {})
        self._http_client = client
        self._owns_client = client is None
        self._logger = get_logger("release.http")

    @classmethod
    def from_config(cls, config: VaultConfig, headers: dict[str, str] | None = None) -> HttpReleaser:
        if not config.payout_url:
            raise ConfigurationError("payout_url is not configured (OMNIVAULT_PAYOUT_URL)")
        return cls(config.payout_url, timeout=config.http_timeout, headers=headers)

    @property
    def name(self) -> str:
        return "http"

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def close(self) -> None:
        """Close the HTTP client if this releaser created it."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> HttpReleaser:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def release(
        self,
        recipient: str,
        amount: Decimal,
        reference: str | None = None,
    ) -> ReleaseResult:
        reference = reference or str(uuid.uuid4())
        body = {"recipient": recipient, "amount": str(amount), "reference": reference}
        headers = {**self._headers, "Idempotency-Key": reference}

        client = await self._get_client()
        self._logger.debug(f"POST {self._payout_url} ({reference})")
        try:
            response = await client.post(self._payout_url, json=body, headers=headers)
        except httpx.HTTPError as e:
            return self._failed(recipient, amount, reference, f"{type(e).__name__}: {e}")

        if not response.is_success:
            return self._failed(
                recipient,
                amount,
                reference,
                f"Payout endpoint returned {response.status_code}",
                status_code=response.status_code,
            )

        data = self._parse_body(response)
        status = str(data.get("status", "")).lower()
        if status in FAILED_STATUSES:
            return self._failed(
                recipient,
                amount,
                reference,
                str(data.get("error") or f"Payout {status}"),
                status_code=response.status_code,
            )

        return ReleaseResult(
            success=True,
            recipient=recipient,
            amount=amount,
            reference=str(data.get("id") or reference),
            metadata={"status_code": response.status_code, "status": status or None},
        )

    @staticmethod
    def _parse_body(response: httpx.Response) -> dict[str, Any]:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def _failed(
        self,
        recipient: str,
        amount: Decimal,
        reference: str,
        error: str,
        status_code: int | None = None,
    ) -> ReleaseResult:
        self._logger.warning(f"Payout of {amount} to {recipient} failed: {error}")
        return ReleaseResult(
            success=False,
            recipient=recipient,
            amount=amount,
            reference=reference,
            error=error,
            metadata={"status_code": status_code} if status_code is not None else {},
        )
