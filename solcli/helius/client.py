"""Helius DAS API client: asset metadata, token accounts, asset signatures.

DAS methods are JSON-RPC calls on the Helius RPC endpoint. Each call is
issued once; any transport, HTTP, RPC or parse failure raises HeliusError.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from solcli.exceptions import HeliusError
from solcli.helius.models import (
    HeliusAsset,
    HeliusAssetSignature,
    HeliusTokenAccount,
    HeliusTokenAccountsPage,
)

MAINNET_RPC_URL = "https://mainnet.helius-rpc.com/?api-key={api_key}"
# DAS pagination cap
MAX_PAGE_SIZE = 1000


class HeliusClient:
    """Async HTTP client for the Helius DAS API."""

    def __init__(self, api_key: str, rpc_url: str = "", timeout: float = 15.0) -> None:
        if not api_key:
            raise ValueError("Helius API key is empty")
        self._api_key = api_key
        self._rpc_url = rpc_url or MAINNET_RPC_URL.format(api_key=api_key)
        self._client = httpx.AsyncClient(timeout=timeout)

    def __repr__(self) -> str:
        # never show the key
        return "HeliusClient()"

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> HeliusClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _call(self, method: str, params: dict[str, Any]) -> Any:
        payload = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise HeliusError(f"{method} request failed: {e}") from e

        if resp.status_code != 200:
            logger.debug(f"[HELIUS] {method} HTTP {resp.status_code}")
            raise HeliusError(f"{method} HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise HeliusError(f"{method} returned invalid JSON") from e

        if "error" in data:
            logger.debug(f"[HELIUS] {method} RPC error: {data['error']}")
            error = data["error"] or {}
            raise HeliusError(f"{method}: {error.get('message', error)}")

        return data.get("result")

    async def get_asset(self, asset_id: str, *, show_fungible: bool = True) -> HeliusAsset | None:
        """Fetch asset metadata via DAS getAsset. None if Helius has no asset."""
        result = await self._call(
            "getAsset",
            {"id": asset_id, "displayOptions": {"showFungible": show_fungible}},
        )
        if not result:
            return None
        try:
            return _parse_asset(result)
        except (ValueError, AttributeError, TypeError) as e:
            raise HeliusError(f"getAsset: unexpected asset shape for {asset_id}: {e}") from e

    async def get_token_accounts(
        self,
        *,
        owner: str | None = None,
        mint: str | None = None,
        page: int = 1,
        limit: int = 100,
    ) -> HeliusTokenAccountsPage:
        """Fetch token accounts filtered by owner and/or mint (one page)."""
        params: dict[str, Any] = {"page": max(page, 1), "limit": min(max(limit, 1), MAX_PAGE_SIZE)}
        if owner:
            params["owner"] = owner
        if mint:
            params["mint"] = mint

        result = await self._call("getTokenAccounts", params) or {}
        try:
            return HeliusTokenAccountsPage(
                total=result.get("total", 0),
                limit=result.get("limit", params["limit"]),
                page=result.get("page", params["page"]),
                token_accounts=[
                    HeliusTokenAccount(
                        address=acc.get("address", ""),
                        mint=acc.get("mint"),
                        owner=acc.get("owner"),
                        amount=int(acc.get("amount") or 0),
                    )
                    for acc in result.get("token_accounts", [])
                ],
            )
        except (ValueError, AttributeError, TypeError) as e:
            raise HeliusError(f"getTokenAccounts: unexpected response: {e}") from e

    async def get_signatures_for_asset(
        self, asset_id: str, *, limit: int = 25, page: int = 1
    ) -> list[HeliusAssetSignature]:
        """Recent transaction signatures involving an asset (mostly NFTs/cNFTs)."""
        result = await self._call(
            "getSignaturesForAsset",
            {"id": asset_id, "page": max(page, 1), "limit": min(max(limit, 1), MAX_PAGE_SIZE)},
        ) or {}
        try:
            return [
                HeliusAssetSignature(
                    signature=item[0],
                    type=item[1] if len(item) > 1 else "",
                )
                for item in result.get("items", [])
                if item
            ]
        except (ValueError, AttributeError, TypeError, LookupError) as e:
            raise HeliusError(f"getSignaturesForAsset: unexpected response: {e}") from e


def _parse_asset(data: dict) -> HeliusAsset:
    """Flatten the parts of a DAS asset we display."""
    metadata = (data.get("content") or {}).get("metadata") or {}
    token_info = data.get("token_info") or {}
    price_info = token_info.get("price_info") or {}

    decimals = token_info.get("decimals")
    if decimals is not None and not 0 <= int(decimals) <= 255:
        decimals = None

    price = price_info.get("price_per_token")
    return HeliusAsset(
        id=data.get("id", ""),
        name=metadata.get("name"),
        symbol=metadata.get("symbol") or token_info.get("symbol"),
        decimals=decimals,
        price_per_token=str(price) if price is not None else None,
    )
