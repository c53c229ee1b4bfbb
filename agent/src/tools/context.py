from __future__ import annotations

import logging
import os
import sys

from logging import Logger
from typing import TYPE_CHECKING, Optional
from chain_types import ChainClient

if TYPE_CHECKING:
    from nearai.agents.environment import Environment

# Set once per run by register_tools; read by every tool call.
_env: Optional[Environment] = None
_chain: Optional[ChainClient] = None

_logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _configure_logging() -> None:
    """Send tool logs to stdout at the level named by SPEND_LIMIT_LOG_LEVEL.

    Unknown level names fall back to INFO. The handler is installed once;
    the level is re-read on every call so a changed env var takes effect.
    """

    level_name = os.getenv("SPEND_LIMIT_LOG_LEVEL", "INFO").upper()
    _logger.setLevel(getattr(logging, level_name, logging.INFO))

    if _logger.handlers:
        return
    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    _logger.addHandler(handler)
    # The agent runtime may configure the root logger too
    _logger.propagate = False

_configure_logging()


def set_context(env: Environment, chain: ChainClient) -> None:
    """Bind the agent environment and chain client used by the spending tools."""
    global _env, _chain
    _env, _chain = env, chain


def get_env() -> Environment:
    if _env is None:
        raise RuntimeError("Agent environment not set; call register_tools first")
    return _env


def get_chain() -> ChainClient:
    if _chain is None:
        raise RuntimeError("Chain client not set; call register_tools first")
    return _chain


def get_logger() -> Logger:
    _configure_logging()
    return _logger
