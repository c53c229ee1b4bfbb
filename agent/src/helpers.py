import os
import asyncio

import requests

from typing import Awaitable, TypeVar, Optional
from chain_types import ChainClient
from datetime import datetime, timezone
from constants import NANOSECONDS_PER_SECOND, DEFAULT_HTTP_TIMEOUT
from lcd_client import LcdClient

# Type‐var for our coroutine runner
T = TypeVar("T")

# ──────────────────────────────────────────────────────────────
# GLOBAL STATE
# ──────────────────────────────────────────────────────────────
_DEFAULT_LCD = {
    "mainnet": "https://lcd.osmosis.zone",
    "testnet": "https://lcd.testnet.osmosis.zone",
}

_EXPLORER_URL = {
    "mainnet": "https://www.mintscan.io/osmosis",
    "testnet": "https://www.mintscan.io/osmosis-testnet",
}

_loop: Optional[asyncio.AbstractEventLoop] = None
"""Mutable module state for the current query context."""
_account_id: Optional[str] = None         # the user’s account when known


# expose handy getters
def account_id() -> Optional[str]: return _account_id
# ──────────────────────────────────────────────────────────────


def _network(network: Optional[str] = None) -> str:
    net = network or os.getenv("OSMOSIS_NETWORK")
    if net not in _DEFAULT_LCD:
        raise RuntimeError(
            "OSMOSIS_NETWORK must be set to 'mainnet' or 'testnet' (got: "
            f"{net or 'unset'})"
        )
    return net


def get_explorer_url() -> str:
    """
    Return the correct block explorer URL based on OSMOSIS_NETWORK.
    """
    return _EXPLORER_URL[_network()]


def explorer_url_or_none() -> Optional[str]:
    """Explorer URL, or None when only OSMOSIS_LCD_URL is configured."""
    try:
        return get_explorer_url()
    except RuntimeError:
        return None


def get_lcd_addr(network: Optional[str] = None) -> str:
    """Return the LCD endpoint for the active network.

    ``OSMOSIS_LCD_URL`` wins when set. Otherwise ``network`` (or
    ``OSMOSIS_NETWORK`` when None) selects a default endpoint.
    """
    override = os.getenv("OSMOSIS_LCD_URL")
    if override:
        return override
    return _DEFAULT_LCD[_network(network)]


def spend_limit_contract() -> str:
    """
    Return the spend-limit contract address from SPEND_LIMIT_CONTRACT.

    There is no per-network default: deployments differ per chain and
    per release, so the address must be configured explicitly.
    """
    address = (os.getenv("SPEND_LIMIT_CONTRACT") or "").strip()
    if not address:
        raise RuntimeError("SPEND_LIMIT_CONTRACT must be set to the spend-limit contract address")
    return address


def ensure_loop() -> asyncio.AbstractEventLoop:
    """Return a long-lived event loop, creating it once if necessary."""

    global _loop

    if _loop is None or _loop.is_closed():
        _loop = asyncio.new_event_loop()
        asyncio.set_event_loop(_loop)
    return _loop


def run_coroutine(coroutine: Awaitable[T]) -> T:
    """
    Helper to run an async coroutine on the shared event loop.
    """
    return ensure_loop().run_until_complete(coroutine)


def _set_state(acct: Optional[str]) -> None:
    global _account_id
    _account_id = acct


def init_chain() -> ChainClient:
    """
    Create the LCD-backed chain client for the active network.

    Also records OSMOSIS_ACCOUNT_ID (when set) as the default account
    for tools that accept `me`.
    """
    lcd_addr = get_lcd_addr()

    raw_timeout = (os.getenv("OSMOSIS_LCD_TIMEOUT") or "").strip()
    try:
        timeout = float(raw_timeout) if raw_timeout else DEFAULT_HTTP_TIMEOUT
    except ValueError:
        raise RuntimeError(
            f"OSMOSIS_LCD_TIMEOUT must be a number of seconds (got: {raw_timeout})"
        ) from None

    _set_state(acct=(os.getenv("OSMOSIS_ACCOUNT_ID") or "").strip() or None)
    return LcdClient(lcd_addr, timeout=timeout)


def resolve_account(account: Optional[str]) -> Optional[str]:
    """Resolve `me`, `self` or an empty value to the configured account."""
    acct = account.strip() if isinstance(account, str) else ""
    if acct in ("", "me", "self"):
        return account_id()
    return acct


def is_rpc_connectivity_error(ex: BaseException) -> bool:
    """True when `ex` looks like the LCD endpoint is unreachable (DNS, refused, timeout)."""
    if isinstance(ex, (requests.ConnectionError, requests.Timeout)):
        return True
    text = str(ex).lower()
    return any(
        needle in text
        for needle in (
            "name or service not known",
            "temporary failure in name resolution",
            "nodename nor servname",
            "connection refused",
            "max retries exceeded",
        )
    )


def format_block_timestamp(ns: int) -> str:
    """Convert a block timestamp (ns since epoch) to a readable UTC datetime."""
    ts = ns / NANOSECONDS_PER_SECOND
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M UTC")
