"""Signing wallet: keypair loaded from the Solana CLI keypair file.

The secret key is only reachable through .keypair; __repr__ and logs show
the public key alone.
"""

from __future__ import annotations

import json
import os

from loguru import logger
from solders.keypair import Keypair  # type: ignore[import-untyped]
from solders.pubkey import Pubkey  # type: ignore[import-untyped]

from solcli.exceptions import KeypairError


class SolanaWallet:
    """Wraps the keypair that pays for and signs transactions."""

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    @classmethod
    def from_file(cls, path: str) -> SolanaWallet:
        """Load a keypair file (JSON array of 64 secret key bytes)."""
        path = os.path.expanduser(path)
        try:
            with open(path, encoding="utf-8") as fh:
                secret = json.load(fh)
        except OSError as e:
            raise KeypairError(f"Failed to read keypair file {path}: {e}") from e
        except ValueError as e:
            raise KeypairError(f"Keypair file {path} is not valid JSON: {e}") from e

        if not isinstance(secret, list) or len(secret) != 64:
            raise KeypairError(f"Keypair file {path} must hold a JSON array of 64 bytes")
        try:
            keypair = Keypair.from_bytes(bytes(secret))
        except (TypeError, ValueError) as e:
            raise KeypairError(f"Keypair file {path} holds an invalid key: {e}") from e

        wallet = cls(keypair)
        logger.info(f"[WALLET] Loaded wallet: {wallet.pubkey_str}")
        return wallet

    def __repr__(self) -> str:
        return f"SolanaWallet(pubkey={self.pubkey_str})"

    @property
    def pubkey(self) -> Pubkey:
        return self._keypair.pubkey()

    @property
    def pubkey_str(self) -> str:
        return str(self._keypair.pubkey())

    @property
    def keypair(self) -> Keypair:
        return self._keypair
