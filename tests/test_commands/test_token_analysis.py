"""End-to-end tests for the token-analysis report against in-memory sources."""

from __future__ import annotations

from decimal import Decimal

import pytest

from config.settings import Settings
from solcli.commands.token_analysis import TokenAnalysisOptions, analyze_token, resolve_api_key
from solcli.exceptions import (
    AccountDecodeError,
    AccountNotFoundError,
    HeliusError,
    InvalidAddressError,
    MissingApiKeyError,
)
from solcli.helius.models import HeliusAsset, HeliusAssetSignature, HeliusTokenAccount
from solcli.rpc.models import TokenAccountBalance, TokenSupply
from tests.helpers import (
    FakeAssets,
    FakePrices,
    FakeRpc,
    account,
    helius_unavailable,
    mint_bytes,
    new_address,
    token_account_bytes,
)


# ── Fixtures ───────────────────────────────────────────────────────────


class Chain:
    """A mint with three token accounts: A:100 and C:50 owned by X, B:0 owned by Y."""

    def __init__(self, decimals: int = 2) -> None:
        self.mint = new_address()
        self.x, self.y = new_address(), new_address()
        self.a, self.b, self.c = new_address(), new_address(), new_address()
        self.rpc = FakeRpc(
            accounts={
                self.mint: account(mint_bytes(decimals, supply=150)),
                self.a: account(token_account_bytes(self.mint, self.x, 100)),
                self.b: account(token_account_bytes(self.mint, self.y, 0)),
                self.c: account(token_account_bytes(self.mint, self.x, 50)),
            },
            largest={
                self.mint: [
                    TokenAccountBalance(address=self.a, amount=100, decimals=decimals),
                    TokenAccountBalance(address=self.b, amount=0, decimals=decimals),
                    TokenAccountBalance(address=self.c, amount=50, decimals=decimals),
                ]
            },
            supply={self.mint: TokenSupply(amount=150, decimals=decimals, ui_amount_string="1.5")},
        )


@pytest.fixture
def chain() -> Chain:
    return Chain()


def _opts(mint: str, **kwargs) -> TokenAnalysisOptions:
    return TokenAnalysisOptions(mint=mint, api_key="key", **kwargs)


# ── Holder ranking ─────────────────────────────────────────────────────


class TestHolderReport:
    async def test_aggregates_owner_and_excludes_zero(self, chain: Chain, capsys):
        holders = await analyze_token(
            _opts(chain.mint, holders_only=True),
            rpc=chain.rpc,
            assets=FakeAssets(),
            price_source=FakePrices(),
        )

        assert [(h.owner, h.total_raw) for h in holders] == [(chain.x, 150)]
        out = capsys.readouterr().out
        assert "(top 1 of 1)" in out
        assert "Token decimals: 2" in out
        assert "On-chain total supply: 1.5" in out
        assert f"  1. {chain.x} holds 1.500000 (2 token account(s), e.g. {chain.a})" in out
        assert chain.y not in out
        assert "Total (all 1 aggregated holders): 1.500000" in out

    async def test_label_from_metadata(self, chain: Chain, capsys):
        assets = FakeAssets(assets={chain.mint: HeliusAsset(id=chain.mint, symbol="TST", name="Test")})
        await analyze_token(
            _opts(chain.mint, holders_only=True), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert f"=== Holders of TST / Test ({chain.mint})" in capsys.readouterr().out

    async def test_metadata_failure_is_not_fatal(self, chain: Chain, capsys):
        assets = FakeAssets(assets={chain.mint: helius_unavailable()})
        holders = await analyze_token(
            _opts(chain.mint, holders_only=True), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert len(holders) == 1
        out = capsys.readouterr().out
        assert "token metadata unavailable" in out
        assert f"=== Holders of {chain.mint} ({chain.mint})" in out

    async def test_missing_supply_is_not_fatal(self, chain: Chain, capsys):
        chain.rpc.supply.clear()
        holders = await analyze_token(
            _opts(chain.mint, holders_only=True), rpc=chain.rpc, assets=FakeAssets(), price_source=FakePrices()
        )
        assert len(holders) == 1
        assert "On-chain total supply" not in capsys.readouterr().out

    async def test_no_largest_accounts(self, chain: Chain, capsys):
        chain.rpc.largest.clear()
        holders = await analyze_token(
            _opts(chain.mint), rpc=chain.rpc, assets=FakeAssets(), price_source=FakePrices()
        )
        assert holders == []
        assert "returned no token accounts" in capsys.readouterr().out

    async def test_invalid_mint_address(self):
        with pytest.raises(InvalidAddressError):
            await analyze_token(
                _opts("not-a-key"), rpc=FakeRpc(), assets=FakeAssets(), price_source=FakePrices()
            )

    async def test_missing_mint_account_is_fatal(self):
        with pytest.raises(AccountNotFoundError):
            await analyze_token(
                _opts(new_address()), rpc=FakeRpc(), assets=FakeAssets(), price_source=FakePrices()
            )

    async def test_undecodable_funded_account_is_fatal(self, chain: Chain):
        chain.rpc.accounts[chain.c] = account(b"\x00" * 12)
        with pytest.raises(AccountDecodeError):
            await analyze_token(
                _opts(chain.mint), rpc=chain.rpc, assets=FakeAssets(), price_source=FakePrices()
            )

    async def test_holders_only_skips_enrichment(self, chain: Chain, capsys):
        assets = FakeAssets()
        await analyze_token(
            _opts(chain.mint, holders_only=True), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert assets.token_account_calls == []
        assert assets.signature_calls == []
        assert "Tip: use --top-holders" in capsys.readouterr().out


# ── Enrichment and signatures ──────────────────────────────────────────


class TestEnrichedReport:
    async def test_other_tokens_listed_by_value(self, chain: Chain, capsys):
        other = new_address()
        chain.rpc.accounts[other] = account(mint_bytes(0))
        assets = FakeAssets(
            assets={other: HeliusAsset(id=other, symbol="USDX")},
            token_accounts={
                chain.x: [
                    HeliusTokenAccount(address=chain.a, mint=chain.mint, owner=chain.x, amount=100),
                    HeliusTokenAccount(address=new_address(), mint=other, owner=chain.x, amount=4),
                ]
            },
        )
        prices = FakePrices({other: Decimal("2.5")})

        await analyze_token(
            _opts(chain.mint, transfer_limit=0), rpc=chain.rpc, assets=assets, price_source=prices
        )

        out = capsys.readouterr().out
        assert f"- {chain.x} also holds:" in out
        assert f"    - USDX ({other}) : 4.000000 (decimals: 0) [price: $2.500000 | ≈ $10.00]" in out
        assert "Tip: use --transfer-limit" in out
        assert prices.calls == [other]

    async def test_owner_lookup_failure_continues(self, chain: Chain, capsys):
        assets = FakeAssets(token_accounts={chain.x: HeliusError("getTokenAccounts HTTP 500")})
        holders = await analyze_token(
            _opts(chain.mint), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert len(holders) == 1
        assert f"- Could not fetch other SPL tokens of {chain.x}" in capsys.readouterr().out

    async def test_no_other_tokens(self, chain: Chain, capsys):
        await analyze_token(_opts(chain.mint), rpc=chain.rpc, assets=FakeAssets(), price_source=FakePrices())
        assert f"- {chain.x} holds no other priced SPL tokens" in capsys.readouterr().out

    async def test_signatures_skipped_for_fungible(self, chain: Chain, capsys):
        assets = FakeAssets()
        await analyze_token(_opts(chain.mint), rpc=chain.rpc, assets=assets, price_source=FakePrices())
        assert assets.signature_calls == []
        assert "this token has 2 decimals" in capsys.readouterr().out

    async def test_signatures_listed_for_zero_decimals(self, capsys):
        chain = Chain(decimals=0)
        assets = FakeAssets(
            signatures=[HeliusAssetSignature(signature="5sig", type="Transfer")]
        )
        await analyze_token(
            _opts(chain.mint, transfer_limit=3), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert assets.signature_calls == [(chain.mint, 3)]
        out = capsys.readouterr().out
        assert "=== Latest 3 transaction signatures" in out
        assert "- 5sig" in out

    async def test_signature_failure_is_not_fatal(self, capsys):
        chain = Chain(decimals=0)
        assets = FakeAssets(signatures=HeliusError("getSignaturesForAsset HTTP 400"))
        holders = await analyze_token(
            _opts(chain.mint), rpc=chain.rpc, assets=assets, price_source=FakePrices()
        )
        assert len(holders) == 1
        assert "Could not fetch transaction signatures" in capsys.readouterr().out


# ── API key resolution ─────────────────────────────────────────────────


class TestResolveApiKey:
    def test_explicit_key_wins(self):
        settings = Settings(helius_api_key="from-env")
        assert resolve_api_key(" cli-key ", settings) == "cli-key"

    def test_falls_back_to_settings(self):
        assert resolve_api_key(None, Settings(helius_api_key="from-env")) == "from-env"

    def test_missing_key_raises(self):
        with pytest.raises(MissingApiKeyError, match="HELIUS_API_KEY"):
            resolve_api_key("  ", Settings(helius_api_key=""))
