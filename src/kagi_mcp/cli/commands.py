from __future__ import annotations
import argparse
import asyncio
import logging
import sys

from kagi_mcp import SERVER_NAME, __version__
from kagi_mcp.config import SUMMARIZER_ENGINES, ConfigError, KagiSettings, load_settings
from kagi_mcp.kagi import KagiClient, KagiTools, build_registry
from kagi_mcp.mcp import McpServer, ServerIdentity, run_stdio_server

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=SERVER_NAME,
        description="Kagi MCP Server for AI assistants"
    )
    parser.add_argument("--api-key", default=None,
                        help="Kagi API key (can also be set via KAGI_API_KEY environment variable)")
    parser.add_argument("--summarizer-engine", default=None,
                        help=f"Default summarizer engine ({', '.join(SUMMARIZER_ENGINES)}; default: cecil)")
    parser.add_argument("--config", default=None,
                        help="Path to a YAML config file (otherwise KAGI_* environment variables are used)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Log level for stderr output")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_server(settings: KagiSettings) -> McpServer:
    """Wire the Kagi tools into an MCP server."""
    tools = KagiTools(KagiClient(settings))
    return McpServer(ServerIdentity(SERVER_NAME, __version__), build_registry(tools))


def _configure_logging(level: str) -> None:
    # stdout carries protocol messages only
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def main(argv: list[str] | None = None) -> int:
    """Parse arguments, load settings and serve until stdin closes.

    Returns:
        Process exit status
    """
    args = build_parser().parse_args(argv)
    _configure_logging(args.log_level or "INFO")

    overrides = {
        "api_key": args.api_key,
        "summarizer_engine": args.summarizer_engine,
        "log_level": args.log_level,
    }
    try:
        settings = load_settings(args.config, overrides=overrides)
    except (ConfigError, FileNotFoundError) as e:
        logger.error(f"Error: {e}")
        return 1

    logging.getLogger().setLevel(getattr(logging, settings.log_level))
    logger.debug(f"Loaded settings: {settings.log_redacted()}")

    server = build_server(settings)
    try:
        asyncio.run(run_stdio_server(server))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.error(f"Fatal server error: {e}", exc_info=True)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())
