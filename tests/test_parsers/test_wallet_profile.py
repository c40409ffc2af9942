"""Tests for the selected-wallet profile loader."""

import asyncio

import pytest

from src.models.wallet import WalletPnlSummary
from src.parsers.alerts import DESTRUCTIVE, NotificationDispatcher
from src.parsers.wallet_profile import WalletProfileLoader

W1 = "0x" + "1" * 40
W2 = "0x" + "2" * 40


@pytest.fixture
def loader(fake_analytics, fake_balances):
    return WalletProfileLoader(fake_analytics, fake_balances, NotificationDispatcher())


@pytest.mark.asyncio
async def test_select_loads_both_halves(loader, fake_analytics, fake_balances, sample_portfolio):
    fake_analytics.summaries[W1] = WalletPnlSummary(address=W1, pnl_usd_total=1500, num_trades=12)
    fake_balances.portfolios[W1] = sample_portfolio(W1)

    selection = await loader.select(W1)

    assert selection is not None
    assert selection.notifications == []
    profile = selection.profile
    assert profile.pnl_summary.pnl_usd_total == 1500
    assert profile.portfolio.total_value_usd == 150.5
    assert loader.current is profile
    assert loader.selected == W1


@pytest.mark.asyncio
async def test_portfolio_failure_is_empty(loader, fake_balances):
    fake_balances.fail.add(W1)

    selection = await loader.select(W1)

    assert selection.profile.portfolio.holdings == []
    assert selection.profile.portfolio.total_value_usd == 0
    assert selection.profile.pnl_summary is not None
    assert selection.notifications == []
    assert loader._notifier.history == []


@pytest.mark.asyncio
async def test_pnl_failure_notifies(loader, fake_analytics, fake_balances, sample_portfolio):
    fake_analytics.fail.add(f"pnl:{W1}")
    fake_balances.portfolios[W1] = sample_portfolio(W1)

    selection = await loader.select(W1)

    assert selection.profile.pnl_summary is None
    assert len(selection.profile.portfolio.holdings) == 2
    [note] = selection.notifications
    assert note.title == "Error"
    assert note.variant == DESTRUCTIVE
    assert loader._notifier.history == [note]


@pytest.mark.asyncio
async def test_superseded_failure_is_silent(loader, fake_analytics):
    """A PnL failure for a wallet the user has moved away from is not reported."""
    fake_analytics.fail.add(f"pnl:{W1}")
    fake_analytics.delays[f"pnl:{W1}"] = 0.05

    first, second = await asyncio.gather(loader.select(W1), loader.select(W2))

    assert first is None
    assert second.notifications == []
    assert loader._notifier.history == []


@pytest.mark.asyncio
async def test_unexpected_error_propagates(loader, fake_balances):
    async def explode(_address):
        raise RuntimeError("bug")

    fake_balances.get_wallet_portfolio = explode
    with pytest.raises(RuntimeError):
        await loader.select(W1)


@pytest.mark.asyncio
async def test_later_selection_wins(loader, fake_analytics, fake_balances):
    """A slow first selection must not overwrite a faster second one."""
    fake_analytics.summaries[W1] = WalletPnlSummary(address=W1, pnl_usd_total=1)
    fake_analytics.summaries[W2] = WalletPnlSummary(address=W2, pnl_usd_total=2)
    fake_analytics.delays[f"pnl:{W1}"] = 0.05
    fake_balances.delays[W1] = 0.05

    first, second = await asyncio.gather(loader.select(W1), loader.select(W2))

    assert first is None
    assert second is not None
    assert loader.selected == W2
    assert loader.current.address == W2
    assert loader.current.pnl_summary.pnl_usd_total == 2


@pytest.mark.asyncio
async def test_close_discards_in_flight(loader, fake_analytics):
    fake_analytics.delays[f"pnl:{W1}"] = 0.05
    fake_analytics.fail.add(f"pnl:{W1}")

    task = asyncio.create_task(loader.select(W1))
    await asyncio.sleep(0)
    loader.close()

    assert await task is None
    assert loader.selected is None
    assert loader.current is None
    assert loader._notifier.history == []


@pytest.mark.asyncio
async def test_fetch_leaves_selection_alone(loader, fake_analytics):
    fake_analytics.fail.add(f"pnl:{W1}")

    profile = await loader.fetch(W1)

    assert profile.address == W1
    assert profile.pnl_summary is None
    assert loader.selected is None
    assert loader.current is None
    assert loader._notifier.history == []
