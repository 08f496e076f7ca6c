"""Native SOL transfer from the configured wallet."""

from loguru import logger
from solders.hash import Hash  # type: ignore[import-untyped]
from solders.message import Message  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]
from solders.system_program import TransferParams, transfer as transfer_ix  # type: ignore[import-untyped]
from solders.transaction import Transaction  # type: ignore[import-untyped]

from solcli.rpc.client import SolanaRpcClient
from solcli.utils.convert import lamports_to_sol, parse_pubkey, parse_sol_amount
from solcli.wallet import SolanaWallet


def build_transfer_tx(
    wallet: SolanaWallet, to: Pubkey, lamports: int, blockhash: Hash
) -> Transaction:
    """System transfer signed by the wallet, which also pays the fee."""
    ix = transfer_ix(TransferParams(from_pubkey=wallet.pubkey, to_pubkey=to, lamports=lamports))
    msg = Message([ix], wallet.pubkey)
    return Transaction([wallet.keypair], msg, blockhash)


async def transfer(
    wallet: SolanaWallet,
    to: str,
    amount: str,
    rpc: SolanaRpcClient,
    *,
    confirm_timeout: float = 60.0,
    poll_interval: float = 1.0,
) -> str:
    """Send `amount` SOL to `to`, wait for confirmation, return the signature."""
    to_pubkey = parse_pubkey(to)
    lamports = parse_sol_amount(amount)

    print(f"Transferring {lamports_to_sol(lamports)} SOL from {wallet.pubkey_str} to {to_pubkey}")

    latest = await rpc.get_latest_blockhash()
    tx = build_transfer_tx(wallet, to_pubkey, lamports, Hash.from_string(latest.blockhash))
    logger.debug(f"[TX] Transfer of {lamports} lamports built, blockhash={latest.blockhash}")

    signature = await rpc.send_and_confirm_transaction(
        tx, timeout=confirm_timeout, poll_interval=poll_interval
    )
    print(f"Transaction Signature: {signature}")
    return signature
