"""Solana JSON-RPC client: the node calls the CLI commands need.

Thin async pass-through over httpx. Every call is issued once: errors
surface as RpcError and the caller decides whether they are fatal.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Any

import httpx
from loguru import logger
from solders.transaction import Transaction  # type: ignore[import-untyped]

from solcli.exceptions import RpcHttpError, RpcResponseError, TransactionError
from solcli.rpc.models import (
    AccountInfo,
    LatestBlockhash,
    SignatureStatus,
    TokenAccountBalance,
    TokenSupply,
)

# getMultipleAccounts accepts at most 100 keys per request
MAX_MULTIPLE_ACCOUNTS = 100

_COMMITMENT_RANK = {"processed": 0, "confirmed": 1, "finalized": 2}


class SolanaRpcClient:
    """Async JSON-RPC client for a Solana node."""

    def __init__(
        self,
        rpc_url: str,
        *,
        commitment: str = "confirmed",
        timeout: float = 15.0,
    ) -> None:
        if not rpc_url:
            raise ValueError("RPC URL is empty")
        self._rpc_url = rpc_url
        self._commitment = commitment
        self._client = httpx.AsyncClient(timeout=timeout)
        self._request_id = 0

    def __repr__(self) -> str:
        return f"SolanaRpcClient(url={self._rpc_url!r}, commitment={self._commitment!r})"

    @property
    def commitment(self) -> str:
        return self._commitment

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> SolanaRpcClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _call(self, method: str, params: list[Any]) -> Any:
        """POST one JSON-RPC request and return its `result` member."""
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        try:
            resp = await self._client.post(self._rpc_url, json=payload)
        except httpx.HTTPError as e:
            raise RpcHttpError(f"{method} request failed: {e}") from e

        if resp.status_code != 200:
            raise RpcHttpError(f"{method} HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise RpcHttpError(f"{method} returned invalid JSON") from e

        if "error" in data:
            error = data["error"] or {}
            raise RpcResponseError(method, error.get("code"), error.get("message", str(error)))

        logger.debug(f"[RPC] {method} ok")
        return data.get("result")

    # ─── Reads ───────────────────────────────────────────────────────

    async def get_balance(self, address: str) -> int:
        """SOL balance in lamports."""
        result = await self._call("getBalance", [address, {"commitment": self._commitment}])
        return int(result["value"])

    async def get_account_info(self, address: str) -> AccountInfo | None:
        """Account state, or None if the account does not exist."""
        result = await self._call(
            "getAccountInfo",
            [address, {"encoding": "base64", "commitment": self._commitment}],
        )
        value = result.get("value") if result else None
        return _parse_account(value) if value else None

    async def get_multiple_accounts(self, addresses: list[str]) -> list[AccountInfo | None]:
        """Accounts in the same order as `addresses` (None for missing ones)."""
        accounts: list[AccountInfo | None] = []
        for start in range(0, len(addresses), MAX_MULTIPLE_ACCOUNTS):
            chunk = addresses[start : start + MAX_MULTIPLE_ACCOUNTS]
            result = await self._call(
                "getMultipleAccounts",
                [chunk, {"encoding": "base64", "commitment": self._commitment}],
            )
            values = result.get("value", []) if result else []
            accounts.extend(_parse_account(v) if v else None for v in values)
        return accounts

    async def get_token_largest_accounts(self, mint: str) -> list[TokenAccountBalance]:
        """Largest token accounts of a mint (the node returns at most 20)."""
        result = await self._call(
            "getTokenLargestAccounts", [mint, {"commitment": self._commitment}]
        )
        return [
            TokenAccountBalance(
                address=entry.get("address", ""),
                amount=int(entry.get("amount", "0") or 0),
                decimals=entry.get("decimals", 0),
                ui_amount_string=entry.get("uiAmountString", ""),
            )
            for entry in result.get("value", [])
        ]

    async def get_token_supply(self, mint: str) -> TokenSupply:
        result = await self._call("getTokenSupply", [mint, {"commitment": self._commitment}])
        value = result["value"]
        return TokenSupply(
            amount=int(value.get("amount", "0") or 0),
            decimals=value.get("decimals", 0),
            ui_amount_string=value.get("uiAmountString", ""),
        )

    async def get_latest_blockhash(self) -> LatestBlockhash:
        result = await self._call("getLatestBlockhash", [{"commitment": self._commitment}])
        value = result["value"]
        return LatestBlockhash(
            blockhash=value["blockhash"],
            last_valid_block_height=value.get("lastValidBlockHeight", 0),
        )

    async def get_minimum_balance_for_rent_exemption(self, size: int) -> int:
        result = await self._call(
            "getMinimumBalanceForRentExemption", [size, {"commitment": self._commitment}]
        )
        return int(result)

    async def get_signature_statuses(self, signatures: list[str]) -> list[SignatureStatus | None]:
        result = await self._call("getSignatureStatuses", [signatures])
        return [
            SignatureStatus(
                slot=s.get("slot", 0),
                confirmations=s.get("confirmations"),
                err=s.get("err"),
                confirmation_status=s.get("confirmationStatus"),
            )
            if s
            else None
            for s in result.get("value", [])
        ]

    # ─── Writes ──────────────────────────────────────────────────────

    async def send_transaction(self, tx: Transaction) -> str:
        """Submit a signed transaction (with preflight) and return its signature."""
        tx_b64 = base64.b64encode(bytes(tx)).decode("ascii")
        result = await self._call(
            "sendTransaction",
            [tx_b64, {"encoding": "base64", "preflightCommitment": self._commitment}],
        )
        if not result:
            raise TransactionError("sendTransaction returned no signature")
        logger.debug(f"[TX] Sent: {result}")
        return str(result)

    async def confirm_transaction(
        self,
        signature: str,
        *,
        timeout: float = 60.0,
        poll_interval: float = 1.0,
    ) -> SignatureStatus:
        """Poll getSignatureStatuses until the signature reaches our commitment."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        wanted = _COMMITMENT_RANK.get(self._commitment, 1)

        while True:
            statuses = await self.get_signature_statuses([signature])
            status = statuses[0] if statuses else None
            if status is not None:
                if status.err is not None:
                    raise TransactionError(f"Transaction {signature} failed: {status.err}")
                reached = _COMMITMENT_RANK.get(status.confirmation_status or "", -1)
                if reached >= wanted:
                    return status
            if loop.time() >= deadline:
                raise TransactionError(
                    f"Transaction {signature} not confirmed within {timeout:.0f}s"
                )
            await asyncio.sleep(poll_interval)

    async def send_and_confirm_transaction(
        self,
        tx: Transaction,
        *,
        timeout: float = 60.0,
        poll_interval: float = 1.0,
    ) -> str:
        signature = await self.send_transaction(tx)
        await self.confirm_transaction(signature, timeout=timeout, poll_interval=poll_interval)
        logger.info(f"[TX] Confirmed: {signature}")
        return signature


def _parse_account(value: dict) -> AccountInfo:
    """Parse a base64-encoded account object."""
    raw = value.get("data") or ["", "base64"]
    data = base64.b64decode(raw[0]) if isinstance(raw, list) else b""
    return AccountInfo(
        lamports=value.get("lamports", 0),
        owner=value.get("owner", ""),
        executable=value.get("executable", False),
        rent_epoch=value.get("rentEpoch", 0),
        space=value.get("space", len(data)),
        data=data,
    )
