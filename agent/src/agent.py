from nearai.agents.environment import Environment
from helpers import ensure_loop, init_chain

SYSTEM_PROMPT = (
    "You answer questions about spend limits on Osmosis smart accounts. "
    "Use query_spending for one authenticator and query_spendings_by_account "
    "for everything tracked on an account; report figures only from tool output. "
    "If the account or authenticator id is missing, ask for it."
)


def run(env: Environment) -> None:
    """
    Entrypoint for one agent turn.

    Builds the LCD chain client from the environment, registers the two
    spending tools and hands the conversation to the model. Every failure
    path ends in a reply so the user never sees silence.
    """

    ensure_loop()
    try:
        chain = init_chain()
    except Exception as e:
        env.add_reply(
            "Could not set up the chain client. Check OSMOSIS_NETWORK, "
            "OSMOSIS_LCD_URL and OSMOSIS_LCD_TIMEOUT.\n"
            f"Error: {e}"
        )
        return

    try:
        # Imported here so a broken tools module still yields a reply
        from tools import register_tools
        tool_defs = register_tools(env, chain)
    except Exception as e:
        env.add_reply(f"Spending tools are unavailable.\nError: {e}")
        return

    messages = [{"role": "system", "content": SYSTEM_PROMPT}, *env.list_messages()]

    try:
        env.completions_and_run_tools(messages, tools=tool_defs)
    except Exception as e:
        env.add_reply(f"Could not generate a reply.\nError: {e}")


# NEAR AI injects `env` into module globals when it loads the agent.
if "env" in globals():
    run(env)  # type: ignore[name-defined]
