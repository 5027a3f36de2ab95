#!/usr/bin/env python3
"""Simple CLI for poking at the persona chat backend locally"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from agentchat.config import settings
from agentchat.core.chains import get_chain, list_chains
from agentchat.core.personas import (
    DEFAULT_PERSONALITY_ID,
    build_system_prompt,
    get_all_personalities,
    has_personality,
)
from agentchat.export import SUPPORTED_FORMATS, ExportError, ExportOptions, collect_export_data, export_data

CLI_USER_ADDRESS = "0x0000000000000000000000000000000000000000"


def print_personalities():
    """Pretty print the personality catalogue"""
    print("🎭 Personalities")
    for personality in get_all_personalities():
        marker = " (default)" if personality.id == DEFAULT_PERSONALITY_ID else ""
        print(f"   {personality.emoji} {personality.id:<12} {personality.name}{marker}")
        print(f"      {personality.description}")


def print_prompt(personality_id: str, chain_id: int) -> int:
    chain = get_chain(chain_id)
    if chain is None:
        print(f"❌ Unsupported chain ID: {chain_id}")
        return 1
    if not has_personality(personality_id):
        print(f"⚠️  Unknown personality '{personality_id}', using {DEFAULT_PERSONALITY_ID}")
    print(build_system_prompt(personality_id, chain, CLI_USER_ADDRESS))
    return 0


def print_chains():
    print("⛓️  Supported chains")
    for chain in list_chains():
        marker = " (default)" if chain.id == settings.default_chain_id else ""
        testnet = " [testnet]" if chain.is_testnet else ""
        print(f"   {chain.icon} {chain.id:<10} {chain.name}{testnet}{marker}")
        print(f"      Explorer: {chain.explorer}")


def load_records(source: Path, record_type: str) -> List[Dict[str, Any]]:
    """Read records from a JSON file: a bare list, or saved tool results."""
    payload = json.loads(source.read_text(encoding="utf-8"))
    if isinstance(payload, list) and all(isinstance(item, dict) for item in payload):
        if not any("toolName" in item or "result" in item for item in payload):
            return payload
        payload = collect_export_data(payload)
    elif isinstance(payload, dict):
        payload = collect_export_data([payload])
    else:
        raise ValueError("Expected a JSON list of records or tool results")
    return payload.get(record_type, [])


def cli_export(source: str, record_type: str, network: str, fmt: str, output_dir: Optional[str]) -> int:
    try:
        records = load_records(Path(source), record_type)
    except (OSError, ValueError) as e:
        print(f"❌ Could not read {source}: {e}")
        return 1

    target_dir = Path(output_dir or settings.export_dir or ".")
    print(f"📦 Exporting {len(records)} {record_type} record(s) as {fmt.upper()}...")
    try:
        result = export_data(records, record_type, network, ExportOptions(format=fmt, output_dir=target_dir))
    except ExportError as e:
        print(f"❌ Export failed: {e}")
        return 1

    print(f"✅ Wrote {result.path} ({len(result.content):,} bytes)")
    return 0


def parse_sse_line(line: str) -> Optional[Dict[str, Any]]:
    """Decode one ``data:`` line; returns None for blanks and the [DONE] marker."""
    if not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if not data or data == "[DONE]":
        return None
    return json.loads(data)


async def stream_reply(
    client: httpx.AsyncClient,
    url: str,
    token: str,
    messages: List[Dict[str, Any]],
    chain_id: int,
    personality_id: str,
) -> str:
    body = {"messages": messages, "chainId": chain_id, "personalityId": personality_id}
    headers = {"Authorization": f"Bearer {token}"}
    reply: List[str] = []

    async with client.stream("POST", f"{url.rstrip('/')}/api/chat", json=body, headers=headers) as response:
        if response.status_code != 200:
            await response.aread()
            raise RuntimeError(f"{response.status_code}: {response.text}")

        async for line in response.aiter_lines():
            event = parse_sse_line(line)
            if event is None:
                continue
            kind = event.get("type")
            if kind == "text-delta":
                delta = event.get("textDelta", "")
                reply.append(delta)
                print(delta, end="", flush=True)
            elif kind == "tool-call":
                print(f"\n   🔧 {event.get('toolName')}({json.dumps(event.get('args', {}))})")
            elif kind == "tool-result":
                result = event.get("result") or {}
                ok = "✅" if result.get("success") else "❌"
                print(f"   {ok} {event.get('toolName')}: {result.get('message') or result.get('error') or ''}")
            elif kind == "error":
                print(f"\n❌ {event.get('error')}")
            elif kind == "finish":
                print()

    return "".join(reply)


async def cli_chat(url: str, token: str, chain_id: int, personality_id: str):
    """Interactive chat against a running server"""
    print("💬 Persona Web3 Chat")
    print(f"   Server: {url}  Chain: {chain_id}  Personality: {personality_id}")
    print("Type 'exit' to quit, 'help' for commands, 'clear' to reset history\n")

    history: List[Dict[str, Any]] = []
    async with httpx.AsyncClient(timeout=httpx.Timeout(60.0, connect=10.0)) as client:
        while True:
            try:
                user_input = input("You: ").strip()
            except (KeyboardInterrupt, EOFError):
                print("\nGoodbye! 👋")
                break

            if user_input.lower() in ["exit", "quit"]:
                print("Goodbye! 👋")
                break
            if user_input.lower() == "help":
                print("Commands: exit, clear, help")
                print("Try: 'what is in my wallet?' or 'show my recent token transfers'")
                continue
            if user_input.lower() == "clear":
                history.clear()
                print("🧹 History cleared")
                continue
            if not user_input:
                continue

            history.append({"role": "user", "content": user_input})
            print("Agent: ", end="", flush=True)
            try:
                reply = await stream_reply(client, url, token, history, chain_id, personality_id)
            except (httpx.HTTPError, RuntimeError) as e:
                print(f"\n❌ Error: {e}")
                history.pop()
                continue
            history.append({"role": "assistant", "content": reply})


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Persona Web3 Chat CLI")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("personalities", help="List available personalities")

    prompt_parser = subparsers.add_parser("prompt", help="Print the system prompt for a personality")
    prompt_parser.add_argument("personality_id", nargs="?", default=DEFAULT_PERSONALITY_ID)
    prompt_parser.add_argument("--chain-id", type=int, default=settings.default_chain_id)

    subparsers.add_parser("chains", help="List supported chains")

    export_parser = subparsers.add_parser("export", help="Export records from a JSON file")
    export_parser.add_argument("source", help="JSON file with records or saved tool results")
    export_parser.add_argument("--type", dest="record_type", required=True, help="token-balances, token-transfers, ...")
    export_parser.add_argument("--network", default="base", help="Network name used in the filename")
    export_parser.add_argument("--format", dest="fmt", choices=list(SUPPORTED_FORMATS), default="csv")
    export_parser.add_argument("--output-dir", help="Directory for the export (default: EXPORT_DIR or cwd)")

    chat_parser = subparsers.add_parser("chat", help="Interactive chat mode")
    chat_parser.add_argument("--url", default=f"http://{settings.host}:{settings.port}")
    chat_parser.add_argument("--token", required=True, help="Access token from /auth/verify")
    chat_parser.add_argument("--chain-id", type=int, default=settings.default_chain_id)
    chat_parser.add_argument("--personality", default=DEFAULT_PERSONALITY_ID)

    return parser


async def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    command = args.command.lower()

    if command == "personalities":
        print_personalities()

    elif command == "prompt":
        return print_prompt(args.personality_id, args.chain_id)

    elif command == "chains":
        print_chains()

    elif command == "export":
        return cli_export(args.source, args.record_type, args.network, args.fmt, args.output_dir)

    elif command == "chat":
        await cli_chat(args.url, args.token, args.chain_id, args.personality)

    else:
        print(f"❌ Unknown command: {command}")
        parser.print_help()
        return 1

    return 0


def run():
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
