"""Cross-token enrichment: what else the top holders of a mint own, and its USD value.

Every lookup here is optional: a holding whose decimals or price cannot be
resolved is dropped with a printed notice, missing metadata is just empty.
"""

from dataclasses import replace
from decimal import Decimal

from loguru import logger

from solcli.analysis.cache import MemoizedResolver
from solcli.analysis.models import HolderToken, TokenMetadata
from solcli.analysis.ports import AccountSource, AssetSource
from solcli.analysis.price_cache import PriceCache
from solcli.exceptions import AccountDecodeError, AccountNotFoundError, HeliusError, SolCliError
from solcli.spl.token import TOKEN_PROGRAM_IDS, decode_mint
from solcli.utils.convert import parse_pubkey, raw_to_ui

# Over-fetch factor for the owner's token accounts, leaving room for filtering
OVERFETCH_FACTOR = 5


async def fetch_mint_decimals(accounts: AccountSource, mint: str) -> int:
    """Decimals from the mint's on-chain state."""
    parse_pubkey(mint)
    info = await accounts.get_account_info(mint)
    if info is None:
        raise AccountNotFoundError(f"Mint account {mint} not found")
    if info.owner not in TOKEN_PROGRAM_IDS:
        raise AccountDecodeError(f"Account {mint} is not a token mint (owned by {info.owner})")
    return decode_mint(info.data).decimals


class EnrichmentContext:
    """Run-scoped caches and sources for the enrichment pass."""

    def __init__(
        self,
        *,
        accounts: AccountSource,
        assets: AssetSource,
        prices: PriceCache,
    ) -> None:
        self._accounts = accounts
        self._assets = assets
        self.prices = prices
        self.decimals: MemoizedResolver[str, int] = MemoizedResolver("decimals")
        self.metadata: MemoizedResolver[str, TokenMetadata] = MemoizedResolver(
            "metadata", fallback=TokenMetadata, failure_types=(HeliusError,)
        )

    @property
    def assets(self) -> AssetSource:
        return self._assets

    async def get_decimals(self, mint: str) -> int:
        """Cached decimals, else decoded from the mint account (raises on failure)."""
        return await self.decimals.get(mint, lambda: fetch_mint_decimals(self._accounts, mint))

    async def get_metadata(self, mint: str) -> TokenMetadata:
        """Cached metadata, else fetched from the indexer; empty on failure."""
        metadata = await self.metadata.get(mint, lambda: self._fetch_metadata(mint))
        if metadata.decimals is not None:
            self.decimals.seed(mint, metadata.decimals)
        return metadata

    async def _fetch_metadata(self, mint: str) -> TokenMetadata:
        asset = await self._assets.get_asset(mint, show_fungible=True)
        if asset is None:
            return TokenMetadata()
        return TokenMetadata(
            name=asset.name,
            symbol=asset.symbol,
            decimals=asset.decimals,
            price_usd=asset.price_per_token,
        )


async def fetch_owner_top_tokens(
    owner: str,
    skip_mint: str,
    limit: int,
    ctx: EnrichmentContext,
) -> list[HolderToken]:
    """Top `limit` other holdings of `owner` by USD value.

    Raises HeliusError if the owner's token accounts cannot be listed.
    """
    if limit <= 0:
        return []

    page = await ctx.assets.get_token_accounts(owner=owner, page=1, limit=limit * OVERFETCH_FACTOR)

    tokens: list[HolderToken] = []
    for account in page.token_accounts:
        mint = account.mint
        if not mint or mint == skip_mint or account.amount == 0:
            continue

        try:
            decimals = await ctx.get_decimals(mint)
        except SolCliError as e:
            print(f"    › Could not resolve decimals for {mint} ({e}), skipped")
            continue

        metadata = await ctx.get_metadata(mint)

        price = metadata.price_usd
        if price is None:
            price = await ctx.prices.get_price(mint)
        if price is None:
            print(f"    › No price quote for {mint}, skipped")
            continue

        metadata = replace(metadata, price_usd=price)
        ctx.metadata.put(mint, metadata)

        amount_ui = raw_to_ui(account.amount, decimals)
        tokens.append(
            HolderToken(
                mint=mint,
                amount_ui=amount_ui,
                decimals=decimals,
                metadata=metadata,
                price_usd=price,
                value_usd=price * amount_ui,
            )
        )

    tokens.sort(key=lambda t: t.value_usd if t.value_usd is not None else Decimal(0), reverse=True)
    logger.debug(f"[ENRICH] {owner}: {len(tokens)} priced holdings, keeping {min(len(tokens), limit)}")
    return tokens[:limit]
