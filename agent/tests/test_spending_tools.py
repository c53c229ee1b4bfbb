from unittest.mock import AsyncMock

import pytest
import requests

import helpers
from contracts.spend_limit import SpendLimitReadOnlyInterface
from tools import spending as spending_tools
from test_utils import make_dummy_resp, spending


@pytest.fixture(autouse=True)
def configured(monkeypatch):
    monkeypatch.setenv("OSMOSIS_NETWORK", "testnet")
    monkeypatch.setenv("SPEND_LIMIT_CONTRACT", "osmo1contract")
    monkeypatch.setattr(helpers, "_account_id", None, raising=False)


def test_query_spending_success(mock_setup):
    """Should query the contract and reply with the formatted spending."""

    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={
        "spending": spending("1500000", "1700000000000000000"),
    })

    spending_tools.query_spending("osmo1alice", "7")

    mock_chain.query_smart.assert_awaited_once_with(
        "osmo1contract",
        {"spending": {"account": "osmo1alice", "authenticator_id": "7"}},
    )
    env.add_reply.assert_called_once()
    msg = env.add_reply.call_args[0][0]
    assert "osmo1alice" in msg
    assert "Authenticator `7`" in msg
    assert "1500000" in msg
    assert "2023-11-14 22:13 UTC" in msg
    assert "mintscan.io/osmosis-testnet" in msg


def test_query_spending_resolves_me(monkeypatch, mock_setup):
    env, mock_chain = mock_setup
    monkeypatch.setattr(helpers, "_account_id", "osmo1me", raising=False)
    mock_chain.query_smart = AsyncMock(return_value={"spending": spending("0", "0")})

    spending_tools.query_spending("me", "1")

    sent = mock_chain.query_smart.await_args[0][1]
    assert sent["spending"]["account"] == "osmo1me"


def test_query_spending_missing_account(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock()

    spending_tools.query_spending("me", "1")

    mock_chain.query_smart.assert_not_awaited()
    env.add_reply.assert_called_once()
    assert "No account ID available" in env.add_reply.call_args[0][0]


def test_query_spending_missing_authenticator(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock()

    spending_tools.query_spending("osmo1alice", "  ")

    mock_chain.query_smart.assert_not_awaited()
    assert "Authenticator ID is required" in env.add_reply.call_args[0][0]


def test_query_spending_not_found(mock_setup):
    """Contract 'not found' errors are mapped to a friendly message."""

    env, mock_chain = mock_setup
    resp = make_dummy_resp(
        {},
        status_code=500,
        text='{"message": "Spend limit not found for account osmo1alice and authenticator 9"}',
    )
    mock_chain.query_smart = AsyncMock(
        side_effect=requests.HTTPError("500 Server Error", response=resp)
    )

    spending_tools.query_spending("osmo1alice", "9")

    env.add_reply.assert_called_once()
    msg = env.add_reply.call_args[0][0]
    assert "No spend limit is tracked" in msg
    assert "`9`" in msg


def test_query_spending_connectivity_hint(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(
        side_effect=requests.ConnectionError("Name or service not known")
    )

    spending_tools.query_spending("osmo1alice", "7")

    msg = env.add_reply.call_args[0][0]
    assert "Failed to query spending" in msg
    assert "LCD endpoint appears unreachable" in msg
    assert "`testnet`" in msg


def test_query_spending_missing_contract(monkeypatch, mock_setup):
    env, mock_chain = mock_setup
    monkeypatch.delenv("SPEND_LIMIT_CONTRACT", raising=False)
    mock_chain.query_smart = AsyncMock()

    spending_tools.query_spending("osmo1alice", "7")

    mock_chain.query_smart.assert_not_awaited()
    msg = env.add_reply.call_args[0][0]
    assert "SPEND_LIMIT_CONTRACT must be set" in msg


def test_query_spendings_by_account_lists_each_authenticator(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={
        "spendings": [
            ["1", spending("100", "1700000000000000000")],
            ["2", spending("250", "1700000000000000000")],
        ],
    })

    spending_tools.query_spendings_by_account("osmo1alice")

    mock_chain.query_smart.assert_awaited_once_with(
        "osmo1contract",
        {"spendings_by_account": {"account": "osmo1alice"}},
    )
    msg = env.add_reply.call_args[0][0]
    assert "Authenticator `1`" in msg and "100" in msg
    assert "Authenticator `2`" in msg and "250" in msg


def test_query_spendings_by_account_empty(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={"spendings": []})

    spending_tools.query_spendings_by_account("osmo1alice")

    env.add_reply.assert_called_once()
    assert "No spendings tracked" in env.add_reply.call_args[0][0]


def test_query_spendings_by_account_unexpected_error(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(side_effect=RuntimeError("decode failed"))

    spending_tools.query_spendings_by_account("osmo1alice")

    msg = env.add_reply.call_args[0][0]
    assert "Failed to query spendings" in msg
    assert "decode failed" in msg
    assert "unreachable" not in msg


def test_tools_work_with_only_lcd_override(monkeypatch, mock_setup):
    """A custom LCD without OSMOSIS_NETWORK still replies, just without explorer links."""

    env, mock_chain = mock_setup
    monkeypatch.delenv("OSMOSIS_NETWORK", raising=False)
    monkeypatch.setenv("OSMOSIS_LCD_URL", "http://localhost:1317")
    assert helpers.init_chain().lcd_addr == "http://localhost:1317"

    mock_chain.query_smart = AsyncMock(return_value={"spending": spending("5", "0")})
    spending_tools.query_spending("osmo1alice", "7")

    msg = env.add_reply.call_args[0][0]
    assert "**Spending** for `osmo1alice`" in msg
    assert "spent **5**" in msg
    assert "mintscan" not in msg

    mock_chain.query_smart = AsyncMock(return_value={"spendings": [["1", spending("9", "0")]]})
    spending_tools.query_spendings_by_account("osmo1alice")

    msg = env.add_reply.call_args[0][0]
    assert "**Spendings** for `osmo1alice`" in msg
    assert "Authenticator `1`" in msg
    assert "mintscan" not in msg


def test_query_spending_rejected_address(mock_setup):
    env, mock_chain = mock_setup
    resp = make_dummy_resp(
        {},
        status_code=500,
        text='{"message": "addr_validate errored: decoding bech32 failed: invalid checksum"}',
    )
    mock_chain.query_smart = AsyncMock(
        side_effect=requests.HTTPError("500 Server Error", response=resp)
    )

    spending_tools.query_spending("osmo1typo", "7")

    env.add_reply.assert_called_once()
    msg = env.add_reply.call_args[0][0]
    assert "rejected the account address" in msg
    assert "osmo1typo" in msg


def test_query_spending_empty_response(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={})

    spending_tools.query_spending("osmo1alice", "7")

    env.add_reply.assert_called_once()
    assert "No spending data returned" in env.add_reply.call_args[0][0]


def test_spending_without_last_spent_at_shows_never(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={
        "spending": {"value_spent_in_period": "0"},
    })

    spending_tools.query_spending("osmo1alice", "7")

    assert "last spend: never" in env.add_reply.call_args[0][0]


def test_spending_with_unparseable_last_spent_at_shows_raw(mock_setup):
    env, mock_chain = mock_setup
    mock_chain.query_smart = AsyncMock(return_value={
        "spending": spending("3", "yesterday"),
    })

    spending_tools.query_spending("osmo1alice", "7")

    assert "last spend: yesterday" in env.add_reply.call_args[0][0]


class RecordingSpendLimit:
    """Stand-in query client that never touches a chain."""

    contract_address = "osmo1fake"

    def __init__(self):
        self.calls = []

    async def spending(self, account, authenticator_id):
        self.calls.append(("spending", account, authenticator_id))
        return {"spending": spending("77", "0")}

    async def spendings_by_account(self, account):
        self.calls.append(("spendings_by_account", account))
        return {"spendings": []}


def test_tools_accept_any_read_only_client(monkeypatch, mock_setup):
    env, _ = mock_setup
    fake: SpendLimitReadOnlyInterface = RecordingSpendLimit()
    monkeypatch.setattr(spending_tools, "_query_client", lambda: fake)

    spending_tools.query_spending("osmo1alice", "4")
    assert "spent **77**" in env.add_reply.call_args[0][0]

    spending_tools.query_spendings_by_account("osmo1alice")
    assert "No spendings tracked" in env.add_reply.call_args[0][0]

    assert fake.calls == [
        ("spending", "osmo1alice", "4"),
        ("spendings_by_account", "osmo1alice"),
    ]
