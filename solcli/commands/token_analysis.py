"""Holder-distribution report for an SPL token mint.

Pipeline:
  1. Mint decimals (on-chain) and supply
  2. Largest token accounts → owners → per-owner totals, ranked
  3. For each top holder: other holdings with price and USD value
  4. Recent asset signatures (zero-decimal assets only)

Steps 1-2 are essential and raise on failure; everything after the
ranking degrades to printed notices.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from config.settings import Settings
from solcli.analysis.enrichment import EnrichmentContext, fetch_mint_decimals, fetch_owner_top_tokens
from solcli.analysis.holders import aggregate_holders, resolve_owners, top_holders, total_raw
from solcli.analysis.models import AggregatedHolder, HolderToken
from solcli.analysis.ports import AssetSource, HolderSource, PriceSource
from solcli.analysis.price_cache import PriceCache
from solcli.exceptions import HeliusError, MissingApiKeyError, RpcError
from solcli.utils.convert import is_valid_pubkey, parse_pubkey, raw_to_ui


@dataclass
class TokenAnalysisOptions:
    mint: str
    api_key: str | None = None
    page: int = 1
    page_size: int = 100
    top_holders: int = 10
    top_other_tokens: int = 5
    transfer_limit: int = 25
    holders_only: bool = False


def resolve_api_key(explicit: str | None, settings: Settings) -> str:
    """--api-key first, then HELIUS_API_KEY (env or .env)."""
    if explicit and explicit.strip():
        return explicit.strip()
    if settings.helius_api_key.strip():
        return settings.helius_api_key.strip()
    raise MissingApiKeyError(
        "No Helius API key provided. Pass --api-key or set the HELIUS_API_KEY environment variable"
    )


async def analyze_token(
    opts: TokenAnalysisOptions,
    *,
    rpc: HolderSource,
    assets: AssetSource,
    price_source: PriceSource,
) -> list[AggregatedHolder]:
    """Print the report for `opts.mint` and return all aggregated holders."""
    mint = str(parse_pubkey(opts.mint))
    logger.debug(f"[ANALYSIS] mint={mint} page={opts.page} page_size={opts.page_size}")

    decimals = await fetch_mint_decimals(rpc, mint)
    try:
        supply = await rpc.get_token_supply(mint)
    except RpcError as e:
        logger.debug(f"[ANALYSIS] getTokenSupply failed: {e}")
        supply = None

    ctx = EnrichmentContext(accounts=rpc, assets=assets, prices=PriceCache(price_source))
    ctx.decimals.seed(mint, decimals)

    mint_metadata = await ctx.get_metadata(mint)
    if mint_metadata.label(mint) == mint:
        print("Note: token metadata unavailable, showing the mint address only.")
    base_label = mint_metadata.label(mint)

    largest = await rpc.get_token_largest_accounts(mint)
    if not largest:
        print("The RPC node returned no token accounts; the mint may have no holders or be invalid.")
        return []

    balances = [(b.address, b.amount) for b in largest if is_valid_pubkey(b.address)]
    if not balances:
        print("Could not parse any token account address returned by the RPC node.")
        return []

    # only funded accounts need an owner
    addresses = [address for address, amount in balances if amount > 0]
    infos = await rpc.get_multiple_accounts(addresses) if addresses else []
    owners = resolve_owners(
        {address: info.data if info else None for address, info in zip(addresses, infos)}
    )

    holders = aggregate_holders(balances, owners)
    if not holders:
        print("No funded holders could be aggregated.")
        return []

    shown = top_holders(holders, opts.top_holders)
    _print_holders(base_label, mint, decimals, supply.ui_amount_string if supply else "", shown, holders)

    if opts.holders_only:
        print("\nTip: use --top-holders N to change how many holders are listed.")
        return holders

    print("\n=== Other SPL tokens held by the top holders (by USD value) ===")
    for holder in shown:
        try:
            others = await fetch_owner_top_tokens(holder.owner, mint, opts.top_other_tokens, ctx)
        except HeliusError as e:
            print(f"- Could not fetch other SPL tokens of {holder.owner} ({e})")
            continue
        _print_other_tokens(holder.owner, others)

    await _print_signatures(mint, decimals, opts.transfer_limit, assets)
    return holders


def _print_holders(
    label: str,
    mint: str,
    decimals: int,
    supply_ui: str,
    shown: list[AggregatedHolder],
    holders: list[AggregatedHolder],
) -> None:
    print(f"=== Holders of {label} ({mint}) (top {len(shown)} of {len(holders)}) ===")
    print(f"Token decimals: {decimals}")
    if supply_ui:
        print(f"On-chain total supply: {supply_ui}")

    for idx, holder in enumerate(shown, start=1):
        print(
            f"{idx:>3}. {holder.owner} holds {holder.total_ui(decimals):.6f} "
            f"({holder.account_count} token account(s), e.g. "
            f"{holder.primary_account or '<unknown-token-account>'})"
        )

    print(f"Subtotal (top {len(shown)}): {raw_to_ui(total_raw(shown), decimals):.6f}")
    print(f"Total (all {len(holders)} aggregated holders): {raw_to_ui(total_raw(holders), decimals):.6f}")


def _print_other_tokens(owner: str, tokens: list[HolderToken]) -> None:
    if not tokens:
        print(f"- {owner} holds no other priced SPL tokens")
        return

    print(f"- {owner} also holds:")
    for token in tokens:
        price = f"price: ${token.price_usd:.6f}" if token.price_usd is not None else "price: unknown"
        value = f"≈ ${token.value_usd:.2f}" if token.value_usd is not None else "≈ $-"
        print(
            f"    - {token.metadata.label(token.mint)} ({token.mint}) : "
            f"{token.amount_ui:.6f} (decimals: {token.decimals}) [{price} | {value}]"
        )


async def _print_signatures(mint: str, decimals: int, limit: int, assets: AssetSource) -> None:
    if limit <= 0:
        print("\nTip: use --transfer-limit N to list recent transaction signatures.")
        return
    if decimals > 0:
        print(
            f"\nNote: getSignaturesForAsset targets NFTs/cNFTs; this token has {decimals} "
            "decimals, skipping the signature lookup."
        )
        return

    print(f"\n=== Latest {limit} transaction signatures (DAS getSignaturesForAsset) ===")
    try:
        signatures = await assets.get_signatures_for_asset(mint, limit=limit)
    except HeliusError as e:
        print(f"Could not fetch transaction signatures ({e}); some assets do not support it.")
        return

    if not signatures:
        print("No transaction signatures returned; try again later or change the limit.")
        return
    for sig in signatures:
        print(f"- {sig.signature}")
