"""Client construction shared by the commands."""

from config.settings import Settings
from solcli.rpc.client import SolanaRpcClient


def open_rpc(settings: Settings) -> SolanaRpcClient:
    """RPC client for the node configured in the Solana CLI config."""
    return SolanaRpcClient(
        settings.json_rpc_url,
        commitment=settings.commitment,
        timeout=settings.http_timeout_sec,
    )
