"""Capabilities the holder analysis needs from the outside world.

SolanaRpcClient, HeliusClient and JupiterPriceClient satisfy these
structurally; tests pass in-memory fakes instead.
"""

from decimal import Decimal
from typing import Protocol

from solcli.helius.models import HeliusAsset, HeliusAssetSignature, HeliusTokenAccountsPage
from solcli.rpc.models import AccountInfo, TokenAccountBalance, TokenSupply


class AccountSource(Protocol):
    async def get_account_info(self, address: str) -> AccountInfo | None: ...

    async def get_multiple_accounts(self, addresses: list[str]) -> list[AccountInfo | None]: ...


class HolderSource(AccountSource, Protocol):
    async def get_token_largest_accounts(self, mint: str) -> list[TokenAccountBalance]: ...

    async def get_token_supply(self, mint: str) -> TokenSupply: ...


class AssetSource(Protocol):
    async def get_asset(self, asset_id: str, *, show_fungible: bool = True) -> HeliusAsset | None: ...

    async def get_token_accounts(
        self,
        *,
        owner: str | None = None,
        mint: str | None = None,
        page: int = 1,
        limit: int = 100,
    ) -> HeliusTokenAccountsPage: ...

    async def get_signatures_for_asset(
        self, asset_id: str, *, limit: int = 25, page: int = 1
    ) -> list[HeliusAssetSignature]: ...


class PriceSource(Protocol):
    async def get_price(self, mint: str) -> Decimal | None: ...
