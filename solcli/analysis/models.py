"""Data types of the holder-distribution report."""

from dataclasses import dataclass, field
from decimal import Decimal

from solcli.utils.convert import raw_to_ui


@dataclass
class HolderSnapshot:
    """One token account belonging to an owner."""

    token_account: str


@dataclass
class AggregatedHolder:
    """One owner's total position in the analyzed mint."""

    owner: str
    total_raw: int = 0
    token_accounts: list[HolderSnapshot] = field(default_factory=list)

    def total_ui(self, decimals: int) -> Decimal:
        return raw_to_ui(self.total_raw, decimals)

    @property
    def primary_account(self) -> str | None:
        return self.token_accounts[0].token_account if self.token_accounts else None

    @property
    def account_count(self) -> int:
        return len(self.token_accounts)


@dataclass
class TokenMetadata:
    """Display metadata for a mint; every field is optional."""

    name: str | None = None
    symbol: str | None = None
    decimals: int | None = None
    price_usd: Decimal | None = None

    def label(self, fallback: str) -> str:
        """"SYMBOL / Name", "SYMBOL", "Name" or the fallback, whichever is available."""
        if self.symbol:
            if self.name and self.name != self.symbol:
                return f"{self.symbol} / {self.name}"
            return self.symbol
        if self.name:
            return self.name
        return fallback


@dataclass
class HolderToken:
    """Another token balance held by a top holder."""

    mint: str
    amount_ui: Decimal
    decimals: int
    metadata: TokenMetadata
    price_usd: Decimal | None = None
    value_usd: Decimal | None = None
