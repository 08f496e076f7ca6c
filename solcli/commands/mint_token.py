"""Create and initialize a new SPL token mint."""

from loguru import logger
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.message import Message  # type: ignore[import-untyped]
from solders.system_program import CreateAccountParams, create_account  # type: ignore[import-untyped]
from solders.transaction import Transaction  # type: ignore[import-untyped]

from solcli.rpc.client import SolanaRpcClient
from solcli.spl.token import MINT_SIZE, TOKEN_PROGRAM_ID, initialize_mint2
from solcli.wallet import SolanaWallet

DEFAULT_DECIMALS = 9


def build_mint_tx(
    payer: SolanaWallet,
    mint: Keypair,
    rent_lamports: int,
    decimals: int,
    blockhash: Hash,
) -> Transaction:
    """create_account + InitializeMint2, signed by payer and the new mint.

    The mint account is its own mint and freeze authority.
    """
    create_ix = create_account(
        CreateAccountParams(
            from_pubkey=payer.pubkey,
            to_pubkey=mint.pubkey(),
            lamports=rent_lamports,
            space=MINT_SIZE,
            owner=TOKEN_PROGRAM_ID,
        )
    )
    init_ix = initialize_mint2(
        mint.pubkey(),
        decimals,
        mint_authority=mint.pubkey(),
        freeze_authority=mint.pubkey(),
    )
    msg = Message([create_ix, init_ix], payer.pubkey)
    return Transaction([payer.keypair, mint], msg, blockhash)


async def mint_token(
    payer: SolanaWallet,
    rpc: SolanaRpcClient,
    *,
    decimals: int = DEFAULT_DECIMALS,
    mint: Keypair | None = None,
    confirm_timeout: float = 60.0,
    poll_interval: float = 1.0,
) -> tuple[Keypair, str]:
    """Create a fresh mint; returns (mint keypair, signature)."""
    mint = mint or Keypair()
    print(f"Mint account ({mint.pubkey()}) private key: {mint}")

    rent = await rpc.get_minimum_balance_for_rent_exemption(MINT_SIZE)
    latest = await rpc.get_latest_blockhash()
    tx = build_mint_tx(payer, mint, rent, decimals, Hash.from_string(latest.blockhash))
    logger.debug(f"[TX] Mint {mint.pubkey()} built: rent={rent} decimals={decimals}")

    signature = await rpc.send_and_confirm_transaction(
        tx, timeout=confirm_timeout, poll_interval=poll_interval
    )
    print(f"Transaction Signature: {signature}")
    return mint, signature
