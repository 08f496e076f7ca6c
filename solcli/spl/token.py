"""SPL Token program layouts: mint / token account decoding, InitializeMint2.

Both SPL Token and Token-2022 share the base layouts below; Token-2022
accounts carry extension data after them, which we ignore.
"""

import struct
from dataclasses import dataclass

from solders.instruction import AccountMeta, Instruction  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solcli.exceptions import AccountDecodeError

TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")
# Programs whose mint and token account base layouts are decoded here
TOKEN_PROGRAM_IDS = frozenset({str(TOKEN_PROGRAM_ID), str(TOKEN_2022_PROGRAM_ID)})

# Mint layout: 82 bytes
# [0:36]   mintAuthority COption<Pubkey> (u32 tag + 32)
# [36:44]  supply (u64)
# [44:45]  decimals (u8)
# [45:46]  isInitialized (bool)
# [46:82]  freezeAuthority COption<Pubkey>
MINT_SIZE = 82

# Token account layout: 165 bytes
# [0:32]    mint
# [32:64]   owner
# [64:72]   amount (u64)
# [72:108]  delegate COption<Pubkey>
# [108:109] state (0 uninitialized, 1 initialized, 2 frozen)
# [109:121] isNative COption<u64>
# [121:129] delegatedAmount (u64)
# [129:165] closeAuthority COption<Pubkey>
TOKEN_ACCOUNT_SIZE = 165

ACCOUNT_STATE_UNINITIALIZED = 0
ACCOUNT_STATE_INITIALIZED = 1
ACCOUNT_STATE_FROZEN = 2

# TokenInstruction discriminator
_INITIALIZE_MINT2 = 20


@dataclass
class MintState:
    """Decoded mint account."""

    mint_authority: Pubkey | None
    supply: int
    decimals: int
    is_initialized: bool
    freeze_authority: Pubkey | None


@dataclass
class TokenAccountState:
    """Decoded token account."""

    mint: Pubkey
    owner: Pubkey
    amount: int
    delegate: Pubkey | None
    state: int
    is_native: int | None
    delegated_amount: int
    close_authority: Pubkey | None


def decode_mint(raw: bytes) -> MintState:
    """Decode raw mint account bytes. Raises AccountDecodeError on bad data."""
    if len(raw) < MINT_SIZE:
        raise AccountDecodeError(f"Mint data too short: {len(raw)} bytes")

    try:
        mint_authority = _unpack_pubkey_option(raw, 0)
        supply = struct.unpack_from("<Q", raw, 36)[0]
        decimals = raw[44]
        is_initialized = raw[45]
        freeze_authority = _unpack_pubkey_option(raw, 46)
    except (struct.error, ValueError) as e:
        raise AccountDecodeError(f"Invalid mint data: {e}") from e

    if is_initialized not in (0, 1):
        raise AccountDecodeError(f"Invalid mint isInitialized flag: {is_initialized}")
    if not is_initialized:
        raise AccountDecodeError("Mint account is not initialized")

    return MintState(
        mint_authority=mint_authority,
        supply=supply,
        decimals=decimals,
        is_initialized=True,
        freeze_authority=freeze_authority,
    )


def decode_token_account(raw: bytes) -> TokenAccountState:
    """Decode raw token account bytes. Raises AccountDecodeError on bad data."""
    if len(raw) < TOKEN_ACCOUNT_SIZE:
        raise AccountDecodeError(f"Token account data too short: {len(raw)} bytes")

    state = raw[108]
    if state not in (ACCOUNT_STATE_INITIALIZED, ACCOUNT_STATE_FROZEN):
        raise AccountDecodeError(f"Token account not initialized (state={state})")

    try:
        native_tag = struct.unpack_from("<I", raw, 109)[0]
        if native_tag not in (0, 1):
            raise ValueError(f"bad COption tag {native_tag}")
        return TokenAccountState(
            mint=Pubkey.from_bytes(raw[0:32]),
            owner=Pubkey.from_bytes(raw[32:64]),
            amount=struct.unpack_from("<Q", raw, 64)[0],
            delegate=_unpack_pubkey_option(raw, 72),
            state=state,
            is_native=struct.unpack_from("<Q", raw, 113)[0] if native_tag == 1 else None,
            delegated_amount=struct.unpack_from("<Q", raw, 121)[0],
            close_authority=_unpack_pubkey_option(raw, 129),
        )
    except (struct.error, ValueError) as e:
        raise AccountDecodeError(f"Invalid token account data: {e}") from e


def _unpack_pubkey_option(raw: bytes, offset: int) -> Pubkey | None:
    """COption<Pubkey>: u32 tag (0 = None, 1 = Some) + 32 bytes."""
    tag = struct.unpack_from("<I", raw, offset)[0]
    if tag == 0:
        return None
    if tag != 1:
        raise ValueError(f"bad COption tag {tag} at offset {offset}")
    return Pubkey.from_bytes(raw[offset + 4 : offset + 36])


def initialize_mint2(
    mint: Pubkey,
    decimals: int,
    mint_authority: Pubkey,
    freeze_authority: Pubkey | None = None,
    program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build the InitializeMint2 instruction (no rent sysvar account needed)."""
    if not 0 <= decimals <= 255:
        raise ValueError(f"decimals out of range: {decimals}")

    # Instruction data packs COption as a 1-byte tag
    data = bytes([_INITIALIZE_MINT2, decimals]) + bytes(mint_authority)
    if freeze_authority is None:
        data += b"\x00"
    else:
        data += b"\x01" + bytes(freeze_authority)

    return Instruction(program_id, data, [AccountMeta(mint, is_signer=False, is_writable=True)])
