"""Pydantic models for Solana JSON-RPC responses."""

from pydantic import BaseModel


class AccountInfo(BaseModel):
    """Account state as returned by getAccountInfo / getMultipleAccounts (base64)."""

    lamports: int = 0
    owner: str = ""
    executable: bool = False
    rent_epoch: int = 0
    space: int = 0
    data: bytes = b""


class TokenAccountBalance(BaseModel):
    """One entry of getTokenLargestAccounts."""

    address: str
    amount: int = 0  # raw, unscaled
    decimals: int = 0
    ui_amount_string: str = ""


class TokenSupply(BaseModel):
    """getTokenSupply result."""

    amount: int = 0
    decimals: int = 0
    ui_amount_string: str = ""


class LatestBlockhash(BaseModel):
    blockhash: str
    last_valid_block_height: int = 0


class SignatureStatus(BaseModel):
    """One entry of getSignatureStatuses (None entries mean "not seen yet")."""

    slot: int = 0
    confirmations: int | None = None  # None = rooted
    err: dict | str | None = None
    confirmation_status: str | None = None
