# src/main.py — v1
"""CLI entry point: invoke, policies, wait commands.

Usage:
    infergate invoke <model_key> [--category C] (--prompt TEXT | --payload JSON) [-o FILE]
    infergate policies
    infergate wait <model_key>
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

from infergate.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return asyncio.run(args.func(args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="infergate",
        description=f"infergate v{__version__} - resilient calls to hosted inference models",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- invoke ---
    p_invoke = subparsers.add_parser("invoke", help="Run one inference request")
    p_invoke.add_argument("model_key", help="Catalog key (e.g. flux-schnell) or model id")
    p_invoke.add_argument(
        "-c", "--category", default=None,
        help="Model category (image, audio, text, vision, multimodal, video); "
        "defaults to the catalog category",
    )
    source = p_invoke.add_mutually_exclusive_group(required=True)
    source.add_argument("--prompt", default=None, help="Text input, sent as {\"inputs\": ...}")
    source.add_argument("--payload", default=None, help="Raw JSON request body")
    p_invoke.add_argument(
        "-o", "--output", type=Path, default=None,
        help="Write the result payload to this file",
    )
    p_invoke.add_argument(
        "--no-fallback", action="store_true",
        help="Do not try fallback models of the same category",
    )
    p_invoke.set_defaults(func=_cmd_invoke)

    # --- policies ---
    p_policies = subparsers.add_parser("policies", help="Show retry policy per category")
    p_policies.set_defaults(func=_cmd_policies)

    # --- wait ---
    p_wait = subparsers.add_parser("wait", help="Show expected cold-start wait for a model")
    p_wait.add_argument("model_key", help="Catalog key")
    p_wait.set_defaults(func=_cmd_wait)

    return parser


async def _cmd_invoke(args: argparse.Namespace) -> int:
    """Execute a single inference request through the gateway."""
    from infergate.config.settings import load_settings
    from infergate.gateway.catalog import get_model_spec
    from infergate.gateway.fallback import invoke_with_fallback
    from infergate.gateway.gateway import InferenceGateway
    from infergate.logging.logger import setup_logging
    from infergate.transport.transport_factory import create_transport

    settings = load_settings()
    setup_logging(
        level="DEBUG" if args.verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )

    payload = _build_payload(args)
    category = args.category
    if category is None:
        spec = get_model_spec(args.model_key)
        category = spec.category.value if spec else "default"

    async with create_transport(settings.transport, settings) as transport:
        gateway = InferenceGateway(transport)
        if settings.fallback_enabled and not args.no_fallback:
            result = await invoke_with_fallback(gateway, args.model_key, category, payload)
        else:
            result = await gateway.invoke(args.model_key, category, payload)

    if not result.success:
        print(f"Failed after {result.attempts_made} attempt(s): {result.error}", file=sys.stderr)
        return 1

    _write_output(result.data, args.output)
    print(
        f"Succeeded with {result.model_key} after {result.attempts_made} attempt(s) "
        f"in {result.elapsed_ms / 1000:.1f}s",
        file=sys.stderr,
    )
    return 0


async def _cmd_policies(args: argparse.Namespace) -> int:
    from infergate.gateway.models import ModelCategory
    from infergate.gateway.policies import DEFAULT_RETRY_POLICY, get_retry_policy

    rows = [(c.value, get_retry_policy(c)) for c in ModelCategory]
    rows.append(("default", DEFAULT_RETRY_POLICY))
    print(f"{'category':<12}{'retries':>8}{'initial':>10}{'max':>10}{'budget':>10}")
    for name, policy in rows:
        print(
            f"{name:<12}{policy.max_retries:>8}"
            f"{policy.initial_delay_ms / 1000:>9.0f}s{policy.max_delay_ms / 1000:>9.0f}s"
            f"{policy.total_timeout_ms / 1000:>9.0f}s"
        )
    return 0


async def _cmd_wait(args: argparse.Namespace) -> int:
    from infergate.gateway.policies import get_expected_wait

    window = get_expected_wait(args.model_key)
    print(f"{args.model_key}: expect {window.describe()} while the model warms up")
    return 0


def _build_payload(args: argparse.Namespace) -> Any:
    if args.payload is not None:
        return json.loads(args.payload)
    return {"inputs": args.prompt}


def _write_output(data: Any, output: Path | None) -> None:
    if isinstance(data, (bytes, bytearray)):
        if output is None:
            print(f"<{len(data)} bytes of binary output; use -o to save>")
            return
        output.write_bytes(bytes(data))
        print(f"Wrote {len(data)} bytes to {output}")
        return

    text = data if isinstance(data, str) else json.dumps(data, indent=2, ensure_ascii=False)
    if output is None:
        print(text)
    else:
        output.write_text(text, encoding="utf-8")
        print(f"Wrote result to {output}")


if __name__ == "__main__":
    sys.exit(main())
