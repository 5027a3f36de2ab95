"""
Tool description rendering.

The assistant's capabilities are described once as plain data (core wallet /
contract tools, Nodit data tools, supported networks) and then rendered
through a per-personality template so that each character introduces the
same tools in its own voice. Rendering is pure string work over the static
lists below; the same personality id always yields the same text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence


@dataclass(frozen=True)
class ToolDescription:
    """A tool capability as shown to the model."""
    name: str
    purpose: str
    details: str


CORE_TOOLS: tuple[ToolDescription, ...] = (
    ToolDescription(
        name="getTokenDetails",
        purpose="Get comprehensive information about ERC20 tokens",
        details="Fetches name, symbol, total supply, and other metadata for any ERC20 token contract address",
    ),
    ToolDescription(
        name="read-contract",
        purpose="Query smart contract data safely",
        details="Calls read-only functions on smart contracts without sending transactions",
    ),
    ToolDescription(
        name="write-contract",
        purpose="Execute blockchain transactions",
        details="Sends transactions to smart contracts for write operations with proper gas estimation",
    ),
    ToolDescription(
        name="wallet-actions",
        purpose="Manage wallet operations",
        details="Check balances, sign messages, and perform standard wallet functions",
    ),
)

DATA_API_TOOLS: tuple[ToolDescription, ...] = (
    ToolDescription(
        name="getTokenTransfersByAccount",
        purpose="Track token movement history",
        details="Get comprehensive token transfer history for any account across supported networks",
    ),
    ToolDescription(
        name="getTokenBalancesByAccount",
        purpose="Check current token holdings",
        details="Get current token balances for any account across multiple chains",
    ),
    ToolDescription(
        name="getBlockByNumber",
        purpose="Analyze blockchain blocks",
        details="Get detailed block information including transactions and metadata",
    ),
    ToolDescription(
        name="getTransactionByHash",
        purpose="Investigate transaction details",
        details="Get complete transaction details, status, and execution traces",
    ),
)

SUPPORTED_NETWORKS: tuple[str, ...] = (
    "Ethereum (mainnet, testnet)",
    "Polygon (mainnet, testnet)",
    "Arbitrum (mainnet, testnet)",
    "Avalanche (mainnet, testnet)",
    "Optimism (mainnet, testnet)",
    "Base (mainnet, testnet)",
    "And other supported EVM networks",
)

ToolFormatter = Callable[[ToolDescription], str]
NetworksFormatter = Callable[[Sequence[str]], str]


@dataclass(frozen=True)
class ToolDescriptionTemplate:
    """Phrasing rules one personality applies to the fixed tool lists."""
    intro: str
    tool_format: ToolFormatter
    data_api_prefix: str
    data_api_format: ToolFormatter
    networks_prefix: str
    networks_format: NetworksFormatter
    conclusion: str
    tool_prefix: str = ""


# Leading verb of a tool's details sentence
_LEADING_VERB = re.compile(r"^(?:Get |Track |Analyze |Investigate )")
_ANY_VERB = re.compile(r"Get |Track |Analyze |Investigate ")
_WORD_START = re.compile(r"\b\w")


def _lower_word_starts(text: str) -> str:
    return _WORD_START.sub(lambda m: m.group(0).lower(), text)


def _replace_leading_verb(text: str, replacement: Callable[[str], str]) -> str:
    return _LEADING_VERB.sub(lambda m: replacement(m.group(0)), text, count=1)


def _bullets(networks: Sequence[str]) -> str:
    return "\n".join(f"- {network}" for network in networks)


def _plain(tool: ToolDescription) -> str:
    return f"- '{tool.name}': {tool.details}"


TOOL_TEMPLATES: Dict[str, ToolDescriptionTemplate] = {
    "professional": ToolDescriptionTemplate(
        intro="Your available tools include:",
        tool_format=_plain,
        data_api_prefix="**Nodit Web3 Data API Tools:**",
        data_api_format=_plain,
        networks_prefix="For Nodit tools, you can query data from multiple networks including:",
        networks_format=_bullets,
        conclusion=(
            "When creating transactions or interacting with contracts, clearly state the action to be taken "
            "and provide thorough explanations of the technical implications."
        ),
    ),
    "casual": ToolDescriptionTemplate(
        intro="Here's what I can help you with:",
        tool_format=lambda tool: f"- '{tool.name}': {_lower_word_starts(tool.details)} - pretty cool, right?",
        data_api_prefix="**My Nodit tools are pretty sweet:**",
        data_api_format=lambda tool: (
            f"- '{tool.name}': {_replace_leading_verb(tool.details, str.lower)}"
        ),
        networks_prefix="I work with all the main chains:",
        networks_format=lambda networks: ", ".join(networks) + ", and a bunch of others.",
        conclusion=(
            "I keep things real and straightforward - no need to overcomplicate stuff. "
            "If something seems sketchy, I'll let you know."
        ),
    ),
    "trump": ToolDescriptionTemplate(
        intro="My tools are incredible, absolutely incredible:",
        tool_format=lambda tool: (
            f"- '{tool.name}': {_lower_word_starts(tool.details)} - the best you've ever seen, believe me"
        ),
        data_api_prefix="**My Nodit tools are fantastic, just fantastic:**",
        data_api_format=lambda tool: f"- '{tool.name}': {tool.details} - tremendous results every time",
        networks_prefix="I work with all the winning chains:",
        networks_format=lambda networks: (
            ", ".join(networks) + " - all tremendous networks, the best networks."
        ),
        conclusion=(
            "When we make deals on the blockchain, we WIN. Every time. "
            "That's what we do - we make the best deals."
        ),
    ),
    "elon": ToolDescriptionTemplate(
        intro="My tools? They're pretty sick, not gonna lie:",
        tool_format=lambda tool: (
            f"- '{tool.name}': {_replace_leading_verb(tool.details, lambda verb: f'I can {verb.lower()}')}"
        ),
        data_api_prefix="**My Nodit superpowers (yeah, I basically have superpowers):**",
        data_api_format=lambda tool: (
            f"- '{tool.name}': "
            f"{_replace_leading_verb(tool.details, lambda verb: f'I can {verb.lower()}')}"
            " like tracking rocket trajectories"
        ),
        networks_prefix="I work with all the major chains:",
        networks_format=lambda networks: (
            ", ".join(networks) + ". Multi-chain is the future, just like multi-planetary life."
        ),
        conclusion=(
            "The thing about Web3? It's not just about making money (though that's cool too). "
            "It's about building a decentralized future where humans can thrive across the solar system."
        ),
    ),
    "gensler": ToolDescriptionTemplate(
        intro=(
            "My tools are designed to help you understand the blockchain ecosystem while maintaining "
            "the highest standards of investor protection:"
        ),
        tool_format=lambda tool: (
            f"- '{tool.name}': {tool.details} - with full regulatory compliance considerations"
        ),
        data_api_prefix="**My Nodit regulatory compliance tools:**",
        data_api_format=lambda tool: (
            f"- '{tool.name}': {tool.details} to ensure compliance with applicable regulations"
        ),
        networks_prefix=(
            "I work with all blockchain networks, but remember - the technology doesn't change "
            "the regulatory requirements:"
        ),
        networks_format=lambda networks: (
            ", ".join(networks) + " - they all operate under the same securities laws."
        ),
        conclusion=(
            "Before we proceed with any Web3 activities, let's make sure we're in full compliance. "
            "The last thing you want is an enforcement action."
        ),
    ),
    "peewee": ToolDescriptionTemplate(
        intro="My tools are SO AWESOME:",
        tool_format=lambda tool: f"- '{tool.name}': {_lower_word_starts(tool.details)} - it's like MAGIC!",
        data_api_prefix="**My Nodit tools are the BEST tools in the WHOLE WIDE WORLD:**",
        data_api_format=lambda tool: (
            f"- '{tool.name}': {_replace_leading_verb(tool.details, lambda _verb: 'I can ')} - isn't that COOL?"
        ),
        networks_prefix="I work with ALL the chains:",
        networks_format=lambda networks: ", ".join(networks) + " - they all have funny names! *giggles*",
        conclusion="Everything is like MAGIC! Do you love magic? I bet you do! Everyone loves magic!",
    ),
    "rambo": ToolDescriptionTemplate(
        intro="My weapons are locked and loaded:",
        # Not anchored: the first verb anywhere in the sentence is replaced
        tool_format=lambda tool: (
            f"- '{tool.name}': {_ANY_VERB.sub('Intel gathering on ', tool.details, count=1)}"
            " - tactical advantage secured"
        ),
        data_api_prefix="**My Nodit tactical advantage:**",
        data_api_format=lambda tool: (
            f"- '{tool.name}': {_replace_leading_verb(tool.details, lambda _verb: 'I can track ')}"
            " - nobody moves without me knowing"
        ),
        networks_prefix="I operate across all theaters:",
        networks_format=lambda networks: (
            ", ".join(networks)
            + " - each one a different battlefield with its own tactical challenges."
        ),
        conclusion=(
            "Rule number one: Never invest more than you can afford to lose. "
            "That's not financial advice, that's survival advice."
        ),
    ),
}

FALLBACK_TEMPLATE_ID = "professional"


def get_tool_template(personality_id: str) -> ToolDescriptionTemplate:
    return TOOL_TEMPLATES.get(personality_id, TOOL_TEMPLATES[FALLBACK_TEMPLATE_ID])


def generate_tool_description(
    personality_id: str,
    core_tools: Sequence[ToolDescription] = CORE_TOOLS,
    data_api_tools: Sequence[ToolDescription] = DATA_API_TOOLS,
    networks: Sequence[str] = SUPPORTED_NETWORKS,
) -> str:
    """Render the tool block of a system prompt in the personality's voice.

    Sections always appear in the same order: intro, core tools, data API
    tools, networks, conclusion. Unknown personality ids use the
    professional template.
    """
    template = get_tool_template(personality_id)

    parts: List[str] = [template.intro + "\n"]
    if template.tool_prefix:
        parts.append(template.tool_prefix + "\n")
    parts.append("\n".join(template.tool_format(tool) for tool in core_tools) + "\n\n")

    parts.append(template.data_api_prefix + "\n")
    parts.append("\n".join(template.data_api_format(tool) for tool in data_api_tools) + "\n\n")

    parts.append(template.networks_prefix + "\n")
    parts.append(template.networks_format(list(networks)) + "\n\n")

    parts.append(template.conclusion)
    return "".join(parts)
