"""Per-run USD price cache in front of the price feed."""

from decimal import Decimal

from loguru import logger

from solcli.analysis.cache import MemoizedResolver
from solcli.analysis.ports import PriceSource


class PriceCache:
    """Memoizes mint → USD price for one command run.

    The feed is queried at most once per mint; "no price" is cached too.
    Any failure of the source counts as "no price", so nothing here raises.
    """

    def __init__(self, source: PriceSource) -> None:
        self._source = source
        self._prices: MemoizedResolver[str, Decimal | None] = MemoizedResolver(
            "price", fallback=lambda: None, failure_types=(Exception,)
        )

    def __len__(self) -> int:
        return len(self._prices)

    async def get_price(self, mint: str) -> Decimal | None:
        return await self._prices.get(mint, lambda: self._fetch(mint))

    async def _fetch(self, mint: str) -> Decimal | None:
        price = await self._source.get_price(mint)
        logger.debug(f"[PRICE] {mint}: {price if price is not None else 'unavailable'}")
        return price
