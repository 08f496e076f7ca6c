"""Builders for raw account data and in-memory fakes of the network clients."""

from __future__ import annotations

import struct
from decimal import Decimal

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solcli.exceptions import HeliusError, RpcResponseError
from solcli.helius.models import (
    HeliusAsset,
    HeliusAssetSignature,
    HeliusTokenAccount,
    HeliusTokenAccountsPage,
)
from solcli.rpc.models import AccountInfo, TokenAccountBalance, TokenSupply
from solcli.spl.token import TOKEN_PROGRAM_ID


def new_address() -> str:
    return str(Pubkey.new_unique())


def _pubkey_option(pubkey: Pubkey | None) -> bytes:
    if pubkey is None:
        return struct.pack("<I", 0) + bytes(32)
    return struct.pack("<I", 1) + bytes(pubkey)


def mint_bytes(
    decimals: int,
    *,
    supply: int = 0,
    mint_authority: Pubkey | None = None,
    freeze_authority: Pubkey | None = None,
    initialized: bool = True,
) -> bytes:
    return (
        _pubkey_option(mint_authority)
        + struct.pack("<Q", supply)
        + bytes([decimals, 1 if initialized else 0])
        + _pubkey_option(freeze_authority)
    )


def token_account_bytes(mint: str, owner: str, amount: int, *, state: int = 1) -> bytes:
    return (
        bytes(Pubkey.from_string(mint))
        + bytes(Pubkey.from_string(owner))
        + struct.pack("<Q", amount)
        + _pubkey_option(None)  # delegate
        + bytes([state])
        + struct.pack("<I", 0) + struct.pack("<Q", 0)  # is_native
        + struct.pack("<Q", 0)  # delegated_amount
        + _pubkey_option(None)  # close_authority
    )


def account(data: bytes, *, lamports: int = 2_039_280, owner: str = str(TOKEN_PROGRAM_ID)) -> AccountInfo:
    return AccountInfo(
        lamports=lamports,
        owner=owner,
        executable=False,
        rent_epoch=0,
        space=len(data),
        data=data,
    )


class FakeRpc:
    """In-memory node: accounts by address, largest accounts and supply per mint."""

    def __init__(
        self,
        accounts: dict[str, AccountInfo] | None = None,
        largest: dict[str, list[TokenAccountBalance]] | None = None,
        supply: dict[str, TokenSupply] | None = None,
    ) -> None:
        self.accounts = accounts or {}
        self.largest = largest or {}
        self.supply = supply or {}
        self.account_info_calls: list[str] = []

    async def get_account_info(self, address: str) -> AccountInfo | None:
        self.account_info_calls.append(address)
        return self.accounts.get(address)

    async def get_multiple_accounts(self, addresses: list[str]) -> list[AccountInfo | None]:
        return [self.accounts.get(a) for a in addresses]

    async def get_token_largest_accounts(self, mint: str) -> list[TokenAccountBalance]:
        return self.largest.get(mint, [])

    async def get_token_supply(self, mint: str) -> TokenSupply:
        if mint not in self.supply:
            raise RpcResponseError("getTokenSupply", -32602, "not a Token mint")
        return self.supply[mint]


class FakeAssets:
    """In-memory Helius DAS: assets, token accounts per owner, signatures."""

    def __init__(
        self,
        assets: dict[str, HeliusAsset | Exception] | None = None,
        token_accounts: dict[str, list[HeliusTokenAccount] | Exception] | None = None,
        signatures: list[HeliusAssetSignature] | Exception | None = None,
    ) -> None:
        self.assets = assets or {}
        self.token_accounts = token_accounts or {}
        self.signatures = signatures if signatures is not None else []
        self.asset_calls: list[str] = []
        self.token_account_calls: list[dict] = []
        self.signature_calls: list[tuple[str, int]] = []

    async def get_asset(self, asset_id: str, *, show_fungible: bool = True) -> HeliusAsset | None:
        self.asset_calls.append(asset_id)
        asset = self.assets.get(asset_id)
        if isinstance(asset, Exception):
            raise asset
        return asset

    async def get_token_accounts(
        self,
        *,
        owner: str | None = None,
        mint: str | None = None,
        page: int = 1,
        limit: int = 100,
    ) -> HeliusTokenAccountsPage:
        self.token_account_calls.append({"owner": owner, "mint": mint, "page": page, "limit": limit})
        accounts = self.token_accounts.get(owner or "", [])
        if isinstance(accounts, Exception):
            raise accounts
        return HeliusTokenAccountsPage(total=len(accounts), limit=limit, page=page, token_accounts=accounts)

    async def get_signatures_for_asset(
        self, asset_id: str, *, limit: int = 25, page: int = 1
    ) -> list[HeliusAssetSignature]:
        self.signature_calls.append((asset_id, limit))
        if isinstance(self.signatures, Exception):
            raise self.signatures
        return self.signatures[:limit]


class FakePrices:
    """Price feed returning fixed prices and counting requests per mint."""

    def __init__(self, prices: dict[str, Decimal | None] | None = None) -> None:
        self.prices = prices or {}
        self.calls: list[str] = []

    async def get_price(self, mint: str) -> Decimal | None:
        self.calls.append(mint)
        return self.prices.get(mint)


def helius_unavailable() -> HeliusError:
    return HeliusError("getAsset HTTP 503")
