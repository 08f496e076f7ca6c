"""Jupiter price feed client: USD price for a single mint.

One GET per call, no retries: a price is an enrichment, so every failure
is logged and reported as "no price" (None).
"""

from decimal import Decimal, InvalidOperation

import httpx
from loguru import logger

PRICE_URL = "https://api.jup.ag/price/v2"


class JupiterPriceClient:
    """Async HTTP client for the Jupiter price API."""

    def __init__(self, api_key: str = "", price_url: str = PRICE_URL, timeout: float = 10.0) -> None:
        self._price_url = price_url or PRICE_URL
        headers: dict[str, str] = {"User-Agent": "solana-token-cli"}
        if api_key:
            headers["x-api-key"] = api_key
        self._client = httpx.AsyncClient(timeout=timeout, headers=headers)

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "JupiterPriceClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def get_price(self, mint: str) -> Decimal | None:
        """Fetch the USD price of a mint. None when unavailable for any reason."""
        try:
            resp = await self._client.get(self._price_url, params={"ids": mint})
        except httpx.HTTPError as e:
            logger.warning(f"[JUPITER] Price request failed for {mint}: {e}")
            return None

        if resp.status_code != 200:
            logger.debug(f"[JUPITER] HTTP {resp.status_code} for {mint}")
            return None

        try:
            data = resp.json()
        except ValueError:
            logger.debug(f"[JUPITER] Invalid JSON for {mint}")
            return None

        return _parse_price(data, mint)


def _parse_price(data: dict, mint: str) -> Decimal | None:
    """Extract the price for `mint`.

    Accepts both the `{"data": {mint: {"price": ...}}}` shape (v2/v4) and the
    flat `{mint: {"usdPrice": ...}}` shape (v3).
    """
    if not isinstance(data, dict):
        return None
    entries = data.get("data", data)
    token_data = entries.get(mint) if isinstance(entries, dict) else None
    if not isinstance(token_data, dict):
        return None

    raw = token_data.get("price", token_data.get("usdPrice"))
    if raw is None:
        return None
    try:
        price = Decimal(str(raw))
    except InvalidOperation:
        logger.debug(f"[JUPITER] Unparseable price {raw!r} for {mint}")
        return None
    return price if price.is_finite() else None
