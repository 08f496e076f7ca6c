from solcli.rpc.client import SolanaRpcClient
from solcli.utils.convert import lamports_to_sol, parse_pubkey


async def balance(address: str, rpc: SolanaRpcClient) -> int:
    """Print and return the SOL balance (lamports) of an address."""
    pubkey = parse_pubkey(address)
    lamports = await rpc.get_balance(str(pubkey))
    print(f"{pubkey}: ◎{lamports_to_sol(lamports):.9f}")
    return lamports
