"""System prompt composition for a single chat request."""

from __future__ import annotations

from ..chains import ChainEntry
from .personalities import get_personality

OPERATING_RULES = """\
When using Nodit tools, specify the network (e.g., 'ethereum') and chainType (e.g., 'mainnet' or 'testnet').
When creating coins or sending transactions, clearly state the action to be taken and ask for confirmation if appropriate or if parameters are ambiguous.
If the user asks about a contract that is not configured for this chain, tell them that the contract details are not available in the current setup, and offer standard ERC20 calls through 'getTokenDetails' or the other tools instead.
After sending a transaction, call 'showTransaction' with its hash so the user can follow it."""


def build_system_prompt(personality_id: str | None, chain: ChainEntry, user_address: str) -> str:
    """Personality prompt plus the per-request context.

    Chain name/id and the user's address are the only values that change
    between requests.
    """
    personality = get_personality(personality_id)
    context = (
        f"You are currently configured to work with {chain.name} (chainId: {chain.id}). "
        "Tools like 'getTokenDetails' will operate on this chain unless otherwise specified by the user.\n"
        f"The current user's address is {user_address}."
    )
    return f"{personality.system_prompt}\n\n{OPERATING_RULES}\n\n{context}"
