"""Tests for the analysis, wallet and health endpoints."""

import pytest

from src.models.analysis import LeaderboardEntry, TokenHolder, TokenInfo
from src.models.wallet import WalletPnlSummary

TOKEN_X = "0x" + "a" * 40
TOKEN_Y = "0x" + "b" * 40
WALLET_A = "0x" + "1" * 40
WALLET_B = "0x" + "2" * 40
WALLET_C = "0x" + "3" * 40


@pytest.fixture
def seeded(fake_analytics):
    fake_analytics.infos[TOKEN_X] = TokenInfo(address=TOKEN_X, symbol="X", name="Token X")
    fake_analytics.infos[TOKEN_Y] = TokenInfo(address=TOKEN_Y, symbol="Y", name="Token, Y")
    fake_analytics.leaderboards[TOKEN_X] = [
        LeaderboardEntry(address=WALLET_A, pnl_usd_total=500, pnl_usd_realised=500, roi_percent=20),
        LeaderboardEntry(address=WALLET_B, pnl_usd_total=300, pnl_usd_realised=300, roi_percent=10),
    ]
    fake_analytics.leaderboards[TOKEN_Y] = [
        LeaderboardEntry(address=WALLET_A, pnl_usd_total=400, pnl_usd_realised=400, roi_percent=15),
        LeaderboardEntry(address=WALLET_C, pnl_usd_total=200, pnl_usd_realised=200, roi_percent=5),
    ]
    return fake_analytics


class TestAnalysis:
    def test_run_analysis(self, api_client, seeded) -> None:
        resp = api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X, TOKEN_Y]})

        assert resp.status_code == 200
        body = resp.json()
        report = body["report"]
        assert [w["address"] for w in report["global_ranking"]] == [WALLET_A, WALLET_B, WALLET_C]
        assert report["global_ranking"][0]["pnl_usd_total"] == 900
        assert report["common_wallets"][0]["avg_roi"] == 17.5
        assert report["total_traders"] == 4
        assert report["unique_wallets"] == 3
        assert body["notifications"][0]["title"] == "Analysis Complete"

    def test_current_analysis_persists(self, api_client, seeded) -> None:
        assert api_client.get("/api/v1/analysis").json()["global_ranking"] == []

        api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X]})

        report = api_client.get("/api/v1/analysis").json()
        assert [t["symbol"] for t in report["tokens"]] == ["X"]

    def test_invalid_address(self, api_client, seeded) -> None:
        resp = api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X, "0x123"]})
        assert resp.status_code == 422
        assert seeded.leaderboard_queries == []

    def test_too_many_tokens(self, api_client) -> None:
        addresses = [f"0x{i:040x}" for i in range(6)]
        resp = api_client.post("/api/v1/analysis", json={"addresses": addresses})
        assert resp.status_code == 422

    def test_no_data(self, api_client) -> None:
        resp = api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X]})
        assert resp.status_code == 200
        assert resp.json()["notifications"][0]["variant"] == "destructive"


class TestExport:
    def test_csv(self, api_client, seeded) -> None:
        api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X, TOKEN_Y]})

        resp = api_client.post(
            "/api/v1/analysis/export",
            json={"wallets": [WALLET_B, WALLET_A], "format": "csv", "filename": "top-traders"},
        )

        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == 'attachment; filename="top-traders.csv"'
        lines = resp.text.split("\n")
        assert lines[0] == "address,pnl_usd_total,pnl_usd_realised,pnl_usd_unrealised,roi_percent"
        assert lines[1].startswith(f"{WALLET_B},300,")
        assert lines[2].startswith(f"{WALLET_A},900,")

    def test_json(self, api_client, seeded) -> None:
        api_client.post("/api/v1/analysis", json={"addresses": [TOKEN_X]})

        resp = api_client.post("/api/v1/analysis/export", json={"wallets": [WALLET_A]})

        assert resp.status_code == 200
        assert resp.json() == [
            {
                "address": WALLET_A,
                "pnl_usd_total": 500.0,
                "pnl_usd_realised": 500.0,
                "pnl_usd_unrealised": 0.0,
                "roi_percent": 20.0,
            }
        ]

    def test_empty_csv_rejected(self, api_client) -> None:
        resp = api_client.post("/api/v1/analysis/export", json={"wallets": [WALLET_A], "format": "csv"})
        assert resp.status_code == 400

    def test_bad_filename(self, api_client) -> None:
        resp = api_client.post(
            "/api/v1/analysis/export", json={"wallets": [WALLET_A], "filename": "../etc/passwd"}
        )
        assert resp.status_code == 422


class TestHolders:
    def test_holders(self, api_client, fake_analytics) -> None:
        fake_analytics.holders[TOKEN_X] = [
            TokenHolder(address=WALLET_A, address_label="Whale", value_usd=1e6),
            TokenHolder(address=WALLET_B, value_usd=5e5),
        ]

        resp = api_client.get(f"/api/v1/tokens/{TOKEN_X}/holders?limit=1")

        assert resp.status_code == 200
        assert [h["address"] for h in resp.json()] == [WALLET_A]

    def test_provider_failure(self, api_client, fake_analytics) -> None:
        fake_analytics.fail.add(TOKEN_X)
        assert api_client.get(f"/api/v1/tokens/{TOKEN_X}/holders").status_code == 502

    def test_invalid_address(self, api_client) -> None:
        assert api_client.get("/api/v1/tokens/0xdead/holders").status_code == 422


class TestWallets:
    def test_profile(self, api_client, fake_analytics, fake_balances, sample_portfolio) -> None:
        fake_analytics.summaries[WALLET_A] = WalletPnlSummary(address=WALLET_A, pnl_usd_total=1500)
        fake_balances.portfolios[WALLET_A] = sample_portfolio(WALLET_A)

        resp = api_client.get(f"/api/v1/wallets/{WALLET_A}")

        assert resp.status_code == 200
        body = resp.json()
        assert body["notifications"] == []
        profile = body["profile"]
        assert profile["pnl_summary"]["pnl_usd_total"] == 1500
        assert profile["portfolio"]["total_value_usd"] == 150.5
        assert len(profile["portfolio"]["holdings"]) == 2

    def test_pnl_failure_still_returns_portfolio(self, api_client, fake_analytics, fake_balances, sample_portfolio) -> None:
        fake_analytics.fail.add(f"pnl:{WALLET_A}")
        fake_balances.portfolios[WALLET_A] = sample_portfolio(WALLET_A)

        resp = api_client.get(f"/api/v1/wallets/{WALLET_A}")

        assert resp.status_code == 200
        body = resp.json()
        assert body["profile"]["pnl_summary"] is None
        assert body["profile"]["portfolio"]["total_value_usd"] == 150.5
        [note] = body["notifications"]
        assert note["title"] == "Error"
        assert note["variant"] == "destructive"
        assert note["description"] == "Failed to load wallet data. Please try again."

    def test_date_range(self, api_client, fake_analytics) -> None:
        resp = api_client.get(f"/api/v1/wallets/{WALLET_A}?date_from=2024-01-01&date_to=2024-03-31")
        assert resp.status_code == 200

        resp = api_client.get(f"/api/v1/wallets/{WALLET_A}?date_from=2024-04-01&date_to=2024-03-31")
        assert resp.status_code == 422

    def test_invalid_address(self, api_client) -> None:
        assert api_client.get("/api/v1/wallets/not-a-wallet").status_code == 422

    def test_close_selection(self, api_client) -> None:
        api_client.get(f"/api/v1/wallets/{WALLET_A}")
        assert api_client.delete("/api/v1/wallets/selection").status_code == 204
        assert api_client.app.state.wallet_loader.selected is None

    def test_batch_pnl(self, api_client, fake_analytics) -> None:
        fake_analytics.fail.add(f"pnl:{WALLET_B}")

        resp = api_client.post("/api/v1/wallets/pnl-batch", json={"addresses": [WALLET_A, WALLET_B, WALLET_C]})

        assert resp.status_code == 200
        assert [s["address"] for s in resp.json()] == [WALLET_A, WALLET_C]

    def test_batch_pnl_invalid(self, api_client) -> None:
        resp = api_client.post("/api/v1/wallets/pnl-batch", json={"addresses": ["0x1"]})
        assert resp.status_code == 422


class TestHealth:
    def test_ok(self, api_client, api_keys) -> None:
        body = api_client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["nansen_configured"] is True
        assert body["tokens_in_batch"] == 0

    def test_degraded_without_keys(self, api_client, monkeypatch) -> None:
        from config.settings import settings

        monkeypatch.setattr(settings, "moralis_api_key", "")
        body = api_client.get("/api/v1/health").json()
        assert body["status"] == "degraded"
        assert body["moralis_configured"] is False
