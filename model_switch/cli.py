"""CLI entry point for model-switch.

Thin consumer of BackendManager for scripting and quick checks.

Entry point:
    model-switch backends [--json]
    model-switch generate "prompt" [--backend NAME] [--fallback NAME]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

import httpx
from dotenv import load_dotenv

from model_switch.errors import ConfigurationError, ProtocolError, RegistryError
from model_switch.manager import BackendManager
from model_switch.registry import register_default_backends, select_initial_backend
from model_switch.schema import GenerateOptions, Message

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────
# ARGUMENT PARSING
# ─────────────────────────────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="model-switch",
        description="Generate text from interchangeable local LLM backends.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command")

    # backends
    backends_p = sub.add_parser("backends", help="List configured backends")
    backends_p.add_argument(
        "--json", action="store_true", dest="json_output",
        help="JSON output (name, available, current)",
    )

    # generate
    gen_p = sub.add_parser("generate", help="Send one prompt to the current backend")
    gen_p.add_argument("prompt", help="User prompt")
    gen_p.add_argument("--backend", default=None, help="Backend to switch to (default: auto-select)")
    gen_p.add_argument("--fallback", default=None, help="Backend to use if the first one fails")
    gen_p.add_argument("--system", default=None, help="Optional system message")
    gen_p.add_argument("--temperature", type=float, default=0.0, help="Sampling temperature (0 = backend default)")
    gen_p.add_argument("--max-tokens", type=int, default=0, help="Max tokens (0 = backend default)")
    gen_p.add_argument("--top-p", type=float, default=0.0, help="Nucleus sampling (0 = backend default)")

    return parser


# ─────────────────────────────────────────────────────────────────────
# COMMANDS
# ─────────────────────────────────────────────────────────────────────


async def _close_backends(manager: BackendManager, names: list[str]) -> None:
    """Close adapters this process created. The manager never does."""
    for name in names:
        backend = manager.get_backend(name)
        aclose = getattr(backend, "aclose", None)
        if aclose is not None:
            await aclose()


async def _cmd_backends(manager: BackendManager, json_output: bool = False) -> int:
    """List backends with live availability. Returns exit code."""
    infos = await manager.list_backends()

    if json_output:
        json.dump([info.model_dump() for info in infos], sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    if not infos:
        print("No backends configured.", file=sys.stderr)
        return 1

    for info in infos:
        marker = "*" if info.current else " "
        status = "available" if info.available else "unavailable"
        print(f"{marker} {info.name:<20} {status}")
    return 0


async def _cmd_generate(
    manager: BackendManager,
    prompt: str,
    backend: Optional[str] = None,
    fallback: Optional[str] = None,
    system: Optional[str] = None,
    temperature: float = 0.0,
    max_tokens: int = 0,
    top_p: float = 0.0,
) -> int:
    """Run a single chat turn. Returns exit code."""
    try:
        if backend:
            await manager.switch_backend(backend)
        else:
            await select_initial_backend(manager)
        if fallback:
            manager.set_fallback_backend(fallback)

        messages = []
        if system:
            messages.append(Message(role="system", content=system))
        messages.append(Message(role="user", content=prompt))

        options = GenerateOptions(temperature=temperature, max_tokens=max_tokens, top_p=top_p)
        response = await manager.chat(messages, options)
    except (RegistryError, ProtocolError, httpx.HTTPError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    logger.debug(
        "backend=%s duration=%.2fs total_tokens=%d finish_reason=%s",
        manager.get_current_backend(),
        response.duration.total_seconds(),
        response.usage.total_tokens,
        response.finish_reason,
    )
    print(response.content)
    return 0


async def _run(args: argparse.Namespace) -> int:
    manager = BackendManager()
    try:
        names = register_default_backends(manager)
    except (ConfigurationError, RegistryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "backends":
            return await _cmd_backends(manager, json_output=args.json_output)
        return await _cmd_generate(
            manager,
            prompt=args.prompt,
            backend=args.backend,
            fallback=args.fallback,
            system=args.system,
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            top_p=args.top_p,
        )
    finally:
        await _close_backends(manager, names)


# ─────────────────────────────────────────────────────────────────────
# ENTRY POINT
# ─────────────────────────────────────────────────────────────────────


def main():
    parser = _build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    # Logging
    level = logging.DEBUG if args.verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s %(message)s", stream=sys.stderr)

    # Load env
    load_dotenv()

    sys.exit(asyncio.run(_run(args)))


if __name__ == "__main__":
    main()
