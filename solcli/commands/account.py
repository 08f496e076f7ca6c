from solcli.exceptions import AccountNotFoundError
from solcli.rpc.client import SolanaRpcClient
from solcli.rpc.models import AccountInfo
from solcli.utils.convert import lamports_to_sol, parse_pubkey

# bytes of account data shown in the hex preview
DATA_PREVIEW_BYTES = 64


async def account_info(address: str, rpc: SolanaRpcClient) -> AccountInfo:
    """Print and return the state of an account. Raises if it does not exist."""
    pubkey = parse_pubkey(address)
    info = await rpc.get_account_info(str(pubkey))
    if info is None:
        raise AccountNotFoundError(f"Account {pubkey} not found")

    print(f"{pubkey}:")
    for line in format_account(info):
        print(f"  {line}")
    return info


def format_account(info: AccountInfo) -> list[str]:
    preview = info.data[:DATA_PREVIEW_BYTES].hex()
    if len(info.data) > DATA_PREVIEW_BYTES:
        preview += "…"
    return [
        f"lamports:    {info.lamports} (◎{lamports_to_sol(info.lamports):.9f})",
        f"owner:       {info.owner}",
        f"executable:  {info.executable}",
        f"rent epoch:  {info.rent_epoch}",
        f"data length: {len(info.data)} bytes",
        f"data:        {preview or '<empty>'}",
    ]
