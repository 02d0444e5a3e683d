"""brandbridge CLI: main application entry point.

Usage:
    brandbridge customize --domain example.eu.auth0.com
    brandbridge customize --config brandbridge.yaml --prompt login
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
import webbrowser
from logging.handlers import RotatingFileHandler
from pathlib import Path

import aiohttp
import yaml

from brandbridge.engine.config import BridgeConfig
from brandbridge.engine.errors import BridgeError
from brandbridge.shared.notices import Notifier

logger = logging.getLogger(__name__)

LOG_DIR = Path.home() / ".brandbridge" / "logs"


def _configure_logging(level_name: str, verbose: bool) -> Path:
    """Log to a rotating file, and to stderr when --verbose is set."""
    log_dir = LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "brandbridge.log"

    root = logging.getLogger()
    level = logging.DEBUG if verbose else getattr(logging, level_name.upper(), logging.INFO)
    root.setLevel(level)
    root.handlers.clear()
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s [pid=%(process)d] %(message)s"
    )
    file_handler = RotatingFileHandler(
        log_file, maxBytes=2_000_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        root.addHandler(stream_handler)
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brandbridge",
        description="Live editor bridge for Universal Login branding",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    customize = subparsers.add_parser(
        "customize",
        help="Customize and preview the Universal Login experience in the browser",
    )
    customize.add_argument(
        "--domain", metavar="DOMAIN",
        help="Tenant domain (default: $BRANDBRIDGE_DOMAIN)",
    )
    customize.add_argument(
        "--token", metavar="TOKEN",
        help="Management API access token (default: $BRANDBRIDGE_ACCESS_TOKEN)",
    )
    customize.add_argument(
        "--config", metavar="PATH",
        help="YAML config file",
    )
    customize.add_argument(
        "--locale", metavar="LOCALE",
        help="Locale for custom text (default: en)",
    )
    customize.add_argument(
        "--prompt", metavar="NAME", action="append", dest="prompts",
        help="Enable a prompt area for custom text; repeatable (default: login)",
    )
    customize.add_argument(
        "--no-browser", action="store_true",
        help="Print the editor URL instead of opening a browser",
    )
    customize.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable debug logging on stderr",
    )
    return parser


def resolve_config(args: argparse.Namespace) -> BridgeConfig:
    """Env vars, then the YAML file, then CLI flags."""
    config = BridgeConfig.from_env()
    if args.config:
        from brandbridge.engine.yaml_config import load_yaml_config

        config = load_yaml_config(args.config, base=config)
    if args.domain:
        config.domain = args.domain
    if args.token:
        config.access_token = args.token
    if args.locale:
        config.locale = args.locale
    if args.prompts:
        config.prompts = list(args.prompts)
    return config


def _install_signal_handlers(cancel_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, cancel_event.set)
        except (NotImplementedError, RuntimeError):
            # Windows event loops: Ctrl-C surfaces as KeyboardInterrupt instead.
            logger.debug("Signal handler for %s not supported", sig)


async def _run_customize(config: BridgeConfig, notifier: Notifier, no_browser: bool) -> None:
    from brandbridge.adapters.gateway import ManagementGateway
    from brandbridge.ui.session import customize

    cancel_event = asyncio.Event()
    _install_signal_handlers(cancel_event)

    def _print_url(url: str) -> bool:
        notifier.info(f"Open {url} to edit your branding")
        return True

    async with ManagementGateway(
        config.domain,
        config.access_token,
        timeout_seconds=config.http_timeout_seconds,
    ) as gateway:
        await customize(
            gateway, config.domain, notifier, config,
            cancel_event=cancel_event,
            open_browser=_print_url if no_browser else webbrowser.open,
        )


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = resolve_config(args)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return 2

    if not config.domain or not config.access_token:
        print(
            "Error: a tenant domain and access token are required "
            "(--domain/--token or BRANDBRIDGE_DOMAIN/BRANDBRIDGE_ACCESS_TOKEN).",
            file=sys.stderr,
        )
        return 2

    log_file = _configure_logging(config.log_level, args.verbose)
    logger.info(
        "Starting brandbridge %s domain=%s config=%s log=%s",
        args.command, config.domain, args.config or "<none>", log_file,
    )

    notifier = Notifier()
    try:
        asyncio.run(_run_customize(config, notifier, args.no_browser))
    except (BridgeError, aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.error("brandbridge failed: %s", exc)
        notifier.warning(f"Error: {exc}")
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
