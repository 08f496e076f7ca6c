"""Pydantic models for Helius DAS API responses."""

from decimal import Decimal

from pydantic import BaseModel


class HeliusAsset(BaseModel):
    """Fungible-relevant subset of a DAS getAsset result."""

    id: str
    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    price_per_token: Decimal | None = None  # token_info.price_info, USDC


class HeliusTokenAccount(BaseModel):
    """One entry of DAS getTokenAccounts."""

    address: str = ""
    mint: str | None = None
    owner: str | None = None
    amount: int = 0  # raw, unscaled


class HeliusTokenAccountsPage(BaseModel):
    total: int = 0
    limit: int = 0
    page: int = 1
    token_accounts: list[HeliusTokenAccount] = []


class HeliusAssetSignature(BaseModel):
    """One entry of DAS getSignaturesForAsset ([signature, type] pairs)."""

    signature: str
    type: str = ""
