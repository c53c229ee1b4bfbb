"""
Spend-limit query tools for the agent.

This module exposes two read-only lookups against the spend-limit contract:

- query_spending: spending tracked for one authenticator of an account.
- query_spendings_by_account: every authenticator spending of an account.

Both functions:
- resolve `me`/`self`/empty to the configured OSMOSIS_ACCOUNT_ID.
- map known contract errors to user-friendly messages.
- add an RPC hint when the LCD endpoint looks unreachable.
"""

import os
from logging import Logger
from typing import Optional

import requests

from .context import get_env, get_chain, get_logger
from contracts.spend_limit import Spending, SpendLimitQueryClient, SpendLimitReadOnlyInterface
from helpers import (
    run_coroutine,
    explorer_url_or_none,
    spend_limit_contract,
    resolve_account,
    format_block_timestamp,
    is_rpc_connectivity_error,
)


# -----------------------------------------------------------------------------
# Internal helpers
# -----------------------------------------------------------------------------

def _query_client() -> SpendLimitReadOnlyInterface:
    return SpendLimitQueryClient(get_chain(), spend_limit_contract())


def _error_text(ex: Exception) -> str:
    """Return the exception text plus the LCD response body when there is one."""
    text = str(ex)
    if isinstance(ex, requests.HTTPError) and ex.response is not None:
        body = ex.response.text or ""
        if body:
            text = f"{text}\n{body}"
    return text


def _map_query_error(ex: Exception, account: str, authenticator_id: Optional[str] = None) -> Optional[str]:
    """Return a friendly message for known contract query errors or None."""
    s = _error_text(ex)
    if "Spend limit not found" in s:
        return (
            "ℹ️ No spend limit is tracked for this authenticator.\n"
            f"- Account: `{account}`\n"
            f"- Authenticator: `{authenticator_id}`"
        )
    if "addr_validate" in s or "Invalid input" in s or "decoding bech32 failed" in s:
        return (
            "❌ The contract rejected the account address.\n"
            f"- Account: `{account}`"
        )
    return None


def _rpc_connectivity_hint(ex: Exception) -> Optional[str]:
    """Return a short, actionable hint if the error looks like an LCD outage."""
    if not is_rpc_connectivity_error(ex):
        return None

    current_net = os.getenv("OSMOSIS_NETWORK") or "unset"
    return (
        "📡 LCD endpoint appears unreachable.\n"
        f"- Current OSMOSIS_NETWORK: `{current_net}`\n"
        "- Tip: set `OSMOSIS_LCD_URL` to a reachable gateway for this network.\n"
        "- Check your network/DNS and retry shortly."
    )


def _format_spending(spending: Spending) -> str:
    value = spending.get("value_spent_in_period", "0")
    last = spending.get("last_spent_at")
    try:
        last_str = format_block_timestamp(int(last)) if last is not None else "never"
    except (TypeError, ValueError):
        last_str = str(last)
    return f"spent **{value}** this period (last spend: {last_str})"


def _account_link(acct: str) -> str:
    """Markdown link to the account on the explorer; plain code span without a network."""
    explorer = explorer_url_or_none()
    if explorer is None:
        return f"`{acct}`"
    return f"[`{acct}`]({explorer}/address/{acct})"


def _reply_failure(ex: Exception, what: str, account: str, authenticator_id: Optional[str] = None) -> None:
    env = get_env()
    mapped = _map_query_error(ex, account, authenticator_id)
    if mapped:
        env.add_reply(mapped)
        return
    hint = _rpc_connectivity_hint(ex)
    extra = f"\n\n{hint}" if hint else ""
    env.add_reply(f"❌ Failed to query {what} for `{account}`\n\n**Error:** {ex}{extra}")


# -----------------------------------------------------------------------------
# query_spending
# -----------------------------------------------------------------------------

def query_spending(account: str, authenticator_id: str) -> None:
    """
    Show the spending tracked for one authenticator of `account`.

    `account` may be `me` to use OSMOSIS_ACCOUNT_ID.
    """

    env = get_env()
    logger: Logger = get_logger()

    acct = resolve_account(account)
    if not acct:
        env.add_reply("⚠️ No account ID available. Set `OSMOSIS_ACCOUNT_ID` in secrets, then try again.")
        return

    auth_id = str(authenticator_id).strip() if authenticator_id is not None else ""
    if not auth_id:
        env.add_reply("❌ Authenticator ID is required (e.g. `7`).")
        return

    try:
        resp = run_coroutine(_query_client().spending(account=acct, authenticator_id=auth_id))
    except Exception as e:
        logger.error("query_spending failed for %s/%s: %s", acct, auth_id, e, exc_info=True)
        _reply_failure(e, "spending", acct, auth_id)
        return

    spending = resp.get("spending") if isinstance(resp, dict) else None
    if not spending:
        env.add_reply(f"❌ No spending data returned for `{acct}` (authenticator `{auth_id}`).")
        return

    link = _account_link(acct)
    env.add_reply(
        f"📊 **Spending** for {link}\n"
        f"- 🔑 Authenticator `{auth_id}`: {_format_spending(spending)}"
    )


# -----------------------------------------------------------------------------
# query_spendings_by_account
# -----------------------------------------------------------------------------

def query_spendings_by_account(account: str) -> None:
    """
    List every authenticator spending tracked for `account`.

    `account` may be `me` to use OSMOSIS_ACCOUNT_ID.
    """

    env = get_env()
    logger: Logger = get_logger()

    acct = resolve_account(account)
    if not acct:
        env.add_reply("⚠️ No account ID available. Set `OSMOSIS_ACCOUNT_ID` in secrets, then try again.")
        return

    try:
        resp = run_coroutine(_query_client().spendings_by_account(account=acct))
    except Exception as e:
        logger.error("query_spendings_by_account failed for %s: %s", acct, e, exc_info=True)
        _reply_failure(e, "spendings", acct)
        return

    spendings = resp.get("spendings") if isinstance(resp, dict) else None
    if not spendings:
        env.add_reply(f"ℹ️ No spendings tracked for `{acct}`.")
        return

    link = _account_link(acct)
    lines = [f"📊 **Spendings** for {link}"]
    for auth_id, spending in spendings:
        lines.append(f"- 🔑 Authenticator `{auth_id}`: {_format_spending(spending)}")
    env.add_reply("\n".join(lines))
