"""
movecall command line.

Usage:
    movecall describe 0xPKG::module::function
    movecall check 0xPKG::module::function 42 0xOBJECT ...
    movecall encode 0xPKG::module::function 42 0xOBJECT ... --type-arg 0x2::sui::SUI

Offline use: --signature-json supplies the normalized function JSON and
--object-type ID=TYPE entries replace live object lookups.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from movecall.classify import classify, is_tx_context, type_name
from movecall.config import NetworkContext, load_dotenv, resolve_network_context
from movecall.errors import MoveCallError
from movecall.inputs import parse_cli_value
from movecall.logging import JsonlLogger, default_session_id
from movecall.orchestrator import MoveCallOrchestrator
from movecall.resolver import ObjectTypeResolver, RpcObjectTypeResolver, StaticObjectTypeResolver, SuiRpcClient
from movecall.types import FunctionSignature

logger = logging.getLogger(__name__)

console = Console()


def parse_target(target: str) -> tuple[str, str, str]:
    parts = target.split("::")
    if len(parts) != 3 or not all(parts):
        raise ValueError(f"target must look like 0xPKG::module::function, got '{target}'")
    return parts[0], parts[1], parts[2]


def parse_object_types(entries: list[str]) -> dict[str, str]:
    out: dict[str, str] = {}
    for entry in entries:
        object_id, sep, obj_type = entry.partition("=")
        if not sep or not object_id.strip() or not obj_type.strip():
            raise ValueError(f"--object-type expects ID=TYPE, got '{entry}'")
        out[object_id.strip()] = obj_type.strip()
    return out


def _context(args: argparse.Namespace) -> NetworkContext:
    env = dict(load_dotenv(args.env_file))
    env.update(os.environ)
    return resolve_network_context(network=args.network, rpc_url=args.rpc_url, env=env)


async def _load_signature(args: argparse.Namespace, context: NetworkContext) -> FunctionSignature:
    package, module, function = parse_target(args.target)
    if args.signature_json is not None:
        obj = json.loads(args.signature_json.read_text(encoding="utf-8"))
        return FunctionSignature.from_json(function, obj)
    async with SuiRpcClient(context.rpc_url) as client:
        return await client.get_normalized_function(package, module, function)


def _resolver(args: argparse.Namespace) -> ObjectTypeResolver:
    if args.object_type:
        return StaticObjectTypeResolver(parse_object_types(args.object_type))
    return RpcObjectTypeResolver()


def describe(signature: FunctionSignature) -> Table:
    table = Table(title=f"{signature.name} ({signature.type_parameter_count} type parameter(s))")
    table.add_column("#", justify="right")
    table.add_column("Type")
    table.add_column("Input")
    last = len(signature.parameters) - 1
    for i, t in enumerate(signature.parameters):
        if i == last and is_tx_context(t):
            table.add_row("-", type_name(t), "[dim]implicit[/dim]")
        else:
            table.add_row(str(i), type_name(t), classify(t).value)
    return table


async def run_invocation(args: argparse.Namespace) -> int:
    context = _context(args)
    signature = await _load_signature(args, context)
    if args.command == "describe":
        console.print(describe(signature))
        return 0

    event_log = None
    if args.log_dir is not None:
        event_log = JsonlLogger(base_dir=args.log_dir, session_id=default_session_id())
        event_log.write_session_metadata({"target": args.target, "network": context.network, "rpc_url": context.rpc_url})

    resolver = _resolver(args)
    orchestrator = MoveCallOrchestrator(resolver, context, event_log=event_log)
    try:
        params = orchestrator.bind_parameters(signature, args.type_arg)
        if len(args.args) != len(params):
            console.print(f"[red]Expected {len(params)} argument(s), got {len(args.args)}[/red]")
            return 2
        raw = [parse_cli_value(text, t) for text, t in zip(args.args, params)]
        outcome = await orchestrator.invoke(args.target, signature, raw, args.type_arg)
    finally:
        if isinstance(resolver, RpcObjectTypeResolver):
            await resolver.aclose()

    if args.command == "check" or not outcome.ok:
        table = Table(title=args.target)
        table.add_column("#", justify="right")
        table.add_column("Type")
        table.add_column("Verdict")
        for i, t in enumerate(params):
            if not outcome.errors[i]:
                verdict = "[green]ok[/green]"
            elif outcome.unknown[i]:
                verdict = f"[yellow]{outcome.messages[i]} (object lookup failed)[/yellow]"
            else:
                verdict = f"[red]{outcome.messages[i]}[/red]"
            table.add_row(str(i), type_name(t), verdict)
        console.print(table)
        return 0 if outcome.ok else 1

    tx = outcome.transaction
    assert tx is not None
    if args.sender:
        tx.sender = args.sender
    console.print_json(json.dumps(tx.to_dict()))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Validate and encode Move call arguments")
    parser.add_argument("--network", type=str, default=None, help="mainnet, testnet, devnet or localnet")
    parser.add_argument("--rpc-url", type=str, default=None, help="Fullnode URL (overrides --network)")
    parser.add_argument("--env-file", type=Path, default=Path(".env"))
    parser.add_argument("-v", "--verbose", action="store_true")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument("target", help="0xPKG::module::function")
        p.add_argument("--signature-json", type=Path, default=None, help="Normalized function JSON (skips RPC)")

    p_describe = subparsers.add_parser("describe", help="Show the parameters a function takes")
    add_common(p_describe)

    for name, help_text in (
        ("check", "Validate arguments and print a verdict per parameter"),
        ("encode", "Validate and encode arguments; print the transaction JSON"),
    ):
        p = subparsers.add_parser(name, help=help_text)
        add_common(p)
        p.add_argument("args", nargs="*", help="One value per parameter (vectors: JSON array or a,b,c)")
        p.add_argument("--type-arg", action="append", default=[], help="Type argument, in order")
        p.add_argument(
            "--object-type", action="append", default=[], help="ID=TYPE entry used instead of a live lookup"
        )
        p.add_argument("--log-dir", type=Path, default=None, help="Write a JSONL session log here")
        if name == "encode":
            p.add_argument("--sender", type=str, default=None)

    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        code = asyncio.run(run_invocation(args))
    except (MoveCallError, ValueError, OSError) as e:
        console.print(f"[red]error:[/red] {e}")
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
