"""
Gateway command line.

Usage:
    gateway [--config gateway.yaml] run
    gateway list-channels
    gateway list-skills
    gateway list-events [--limit 20] [--url http://127.0.0.1:8080]
"""

import argparse
import logging
import sys

import httpx
import uvicorn
from dotenv import load_dotenv

from gateway.config import DEFAULT_CONFIG_PATH, Settings, load_settings
from gateway.errors import GatewayError
from gateway.logs import configure_logging
from gateway.main import create_app, discover_skills

logger = logging.getLogger(__name__)


def _gateway_url(settings: Settings) -> str:
    host = settings.server.host
    if host in ("0.0.0.0", "::", ""):
        host = "127.0.0.1"
    return f"http://{host}:{settings.server.port}"


def run_gateway(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    configure_logging(settings.logging.level, settings.logging.format)

    app = create_app(settings)
    logger.info(
        "server starting",
        extra={"addr": f"{settings.server.host}:{settings.server.port}"},
    )
    # uvicorn shuts down gracefully on SIGINT/SIGTERM
    uvicorn.run(app, host=settings.server.host, port=settings.server.port, log_config=None)
    logger.info("server stopped")
    return 0


def list_channels(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    if not settings.channels:
        print("No channels configured.")
        return 0

    print(f"{'NAME':<20} {'TYPE':<15}")
    for ch in settings.channels:
        print(f"{ch.name:<20} {ch.type:<15}")
    return 0


def list_skills(args: argparse.Namespace) -> int:
    settings = load_settings(args.config)
    skills = discover_skills(settings)
    if not skills:
        print("No skills registered.")
        return 0

    print(f"{'NAME':<20} {'DESCRIPTION':<40} PATH")
    for s in skills:
        print(f"{s.name:<20} {s.description:<40} {s.path}")
    return 0


def list_events(args: argparse.Namespace) -> int:
    """Print recent events from a running gateway's admin API."""
    settings = load_settings(args.config)
    url = (args.url or _gateway_url(settings)).rstrip("/")
    headers = {"X-API-Key": settings.server.api_key} if settings.server.api_key else {}

    response = httpx.get(
        f"{url}/admin/events",
        params={"limit": args.limit},
        headers=headers,
        timeout=10.0,
    )
    if response.status_code != 200:
        raise GatewayError(f"gateway returned {response.status_code}: {response.text}")

    events = response.json().get("events", [])
    if not events:
        print("No events found.")
        return 0

    print(f"{'ID':<36}  {'CHANNEL':<15}  {'STATUS':<12}  TIMESTAMP")
    for e in events:
        print(f"{e['id']:<36}  {e['channel_id']:<15}  {e['status']:<12}  {e['timestamp']}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gateway",
        description="Receives webhooks, routes events to an agent, and exposes admin endpoints.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help=f"path to configuration file (default: $GATEWAY_CONFIG or {DEFAULT_CONFIG_PATH})",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Start the gateway HTTP server")
    run.set_defaults(func=run_gateway)

    channels = sub.add_parser("list-channels", help="Print configured channels")
    channels.set_defaults(func=list_channels)

    skills = sub.add_parser("list-skills", help="Print registered skills")
    skills.set_defaults(func=list_skills)

    events = sub.add_parser("list-events", help="Print recent events from a running gateway")
    events.add_argument("--limit", type=int, default=20, help="maximum number of events to display")
    events.add_argument("--url", default=None, help="gateway base URL (default: from config)")
    events.set_defaults(func=list_events)

    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except (GatewayError, httpx.HTTPError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
