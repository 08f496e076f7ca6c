"""Holder aggregation: per-owner totals from the largest token accounts of a mint.

Amounts stay raw integers throughout; scaling happens only for display.
"""

from collections.abc import Iterable, Mapping

from loguru import logger

from solcli.analysis.models import AggregatedHolder, HolderSnapshot
from solcli.exceptions import AccountDecodeError
from solcli.spl.token import decode_token_account


def resolve_owners(accounts: Mapping[str, bytes | None]) -> dict[str, str]:
    """Map token account address → owner address.

    Accounts without data (not found on chain) are left out. Data that does
    not decode as a token account is malformed state and raises.
    """
    owners: dict[str, str] = {}
    for address, data in accounts.items():
        if data is None:
            continue
        try:
            state = decode_token_account(data)
        except AccountDecodeError as e:
            raise AccountDecodeError(f"Failed to decode token account {address}: {e}") from e
        owners[address] = str(state.owner)
    return owners


def aggregate_holders(
    balances: Iterable[tuple[str, int]],
    owners: Mapping[str, str],
) -> list[AggregatedHolder]:
    """Sum raw balances per owner and rank descending.

    Zero balances and accounts with no resolved owner are skipped. Ties keep
    first-seen order.
    """
    by_owner: dict[str, AggregatedHolder] = {}
    skipped = 0

    for account, raw_amount in balances:
        if raw_amount <= 0:
            continue
        owner = owners.get(account)
        if owner is None:
            skipped += 1
            continue

        holder = by_owner.get(owner)
        if holder is None:
            holder = by_owner[owner] = AggregatedHolder(owner=owner)
        holder.total_raw += raw_amount
        holder.token_accounts.append(HolderSnapshot(token_account=account))

    if skipped:
        logger.debug(f"[HOLDERS] Skipped {skipped} funded accounts with no owner data")

    # sorted() is stable, so equal totals keep insertion order
    return sorted(by_owner.values(), key=lambda h: h.total_raw, reverse=True)


def top_holders(holders: list[AggregatedHolder], n: int) -> list[AggregatedHolder]:
    """First max(n, 1) holders; the full list stays available for totals."""
    return holders[: max(n, 1)]


def total_raw(holders: Iterable[AggregatedHolder]) -> int:
    return sum(h.total_raw for h in holders)
