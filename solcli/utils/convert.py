"""Address and amount conversions shared by the commands."""

from decimal import Decimal, InvalidOperation

from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solcli.exceptions import InvalidAddressError, InvalidAmountError

LAMPORTS_PER_SOL = 1_000_000_000
SOL_DECIMALS = 9


def parse_pubkey(value: str) -> Pubkey:
    """Parse a base58 address. Raises InvalidAddressError."""
    try:
        return Pubkey.from_string(value.strip())
    except ValueError as e:
        raise InvalidAddressError(f"Invalid address {value!r}: {e}") from e


def is_valid_pubkey(value: str) -> bool:
    try:
        Pubkey.from_string(value)
    except ValueError:
        return False
    return True


def parse_sol_amount(value: str) -> int:
    """Convert a SOL amount ("1", "0.5") to lamports.

    Rejects non-positive values and more than 9 fractional digits.
    """
    try:
        amount = Decimal(value.strip())
    except InvalidOperation as e:
        raise InvalidAmountError(f"Invalid SOL amount {value!r}") from e

    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountError(f"SOL amount must be positive, got {value!r}")

    lamports = amount * LAMPORTS_PER_SOL
    if lamports != lamports.to_integral_value():
        raise InvalidAmountError(f"SOL amount {value!r} has more than {SOL_DECIMALS} decimals")
    return int(lamports)


def raw_to_ui(raw: int, decimals: int) -> Decimal:
    """Scale an unscaled integer amount by 10**decimals."""
    return Decimal(raw).scaleb(-decimals)


def lamports_to_sol(lamports: int) -> Decimal:
    return raw_to_ui(lamports, SOL_DECIMALS)
