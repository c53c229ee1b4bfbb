from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List

from chain_types import ChainClient
from .context import set_context
from . import spending

if TYPE_CHECKING:
    from nearai.agents.environment import Environment

TOOLS = [
    spending.query_spending,
    spending.query_spendings_by_account,
]


def register_tools(env: Environment, chain: ChainClient) -> List[Dict[str, Any]]:
    """Store the context and register every tool; return their definitions."""
    set_context(env, chain)

    registry = env.get_tool_registry()
    for tool in TOOLS:
        registry.register_tool(tool)

    return [registry.get_tool_definition(tool.__name__) for tool in TOOLS]
