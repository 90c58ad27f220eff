"""Command-line interface for the Pingboard Client.

Usage:
    pingboard user 42
    pingboard users -n 50
    pingboard statuses --id 7
    pingboard groups --json
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pingboard_client import PingboardClient
from pingboard_client.exceptions import (
    APIError,
    ConfigurationError,
    NotFoundError,
    PingboardError,
)
from pingboard_client.utils.logger import TRACE, configure_logging

# ============================================================================
# Display Utilities
# ============================================================================


def format_header(text: str) -> str:
    """Format a header string."""
    return f"\n{'=' * 60}\n  {text}\n{'=' * 60}"


def format_json(data: Any) -> str:
    """Format data as JSON."""
    return json.dumps(data, indent=2, default=str)


def _display_name(item: dict[str, Any]) -> str:
    parts = [item.get("first_name"), item.get("last_name")]
    name = " ".join(p for p in parts if p)
    return name or str(item.get("name") or item.get("message") or "")


def print_items(title: str, items: list[Any]) -> None:
    """Print one line per item: id and a human-friendly label."""
    print(format_header(f"{title} ({len(items)})"))
    for item in items:
        if isinstance(item, dict):
            print(f"  {str(item.get('id', '?')):>8}  {_display_name(item)}")
        else:
            print(f"  {item}")


# ============================================================================
# Command Handlers
# ============================================================================


def cmd_user(client: PingboardClient, user_id: int, as_json: bool) -> int:
    """Fetch and display a single user."""
    try:
        envelope = client.get_user(user_id)
    except NotFoundError:
        print(f"Error: User {user_id} not found", file=sys.stderr)
        return 1

    if as_json:
        print(format_json(envelope))
        return 0

    users = envelope.get("users", []) if isinstance(envelope, dict) else []
    if not users:
        print(f"Error: User {user_id} not found", file=sys.stderr)
        return 1

    user = users[0]
    print(format_header(f"User: {_display_name(user)}"))
    print(f"  Id:           {user.get('id')}")
    print(f"  Title:        {user.get('job_title') or 'N/A'}")
    print(f"  Email:        {user.get('email') or 'N/A'}")
    print(f"  Phone:        {user.get('phone') or 'N/A'}")
    return 0


def cmd_list(items: list[Any], title: str, as_json: bool) -> int:
    """Display a listing."""
    if as_json:
        print(format_json(items))
    else:
        print_items(title, items)
    return 0


# ============================================================================
# Argument Parser
# ============================================================================


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="pingboard",
        description="Pingboard API Client - Query Pingboard from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pingboard user 42              Fetch one user
  pingboard users -n 50          List the first 50+ users
  pingboard statuses --id 7      Fetch one status
  pingboard groups --json        List groups as JSON
        """,
    )

    parser.add_argument("--token", "-t", help="Access token (or set PINGBOARD_ACCESS_TOKEN)")
    parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    parser.add_argument("--max-tries", type=int, help="Maximum attempts per request")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # user
    p = subparsers.add_parser("user", help="Get a user")
    p.add_argument("id", type=int, help="User id")

    # users
    p = subparsers.add_parser("users", help="List users")
    p.add_argument("-n", "--limit", type=int, help="Stop after this many users")

    # statuses
    p = subparsers.add_parser("statuses", help="List statuses")
    p.add_argument("--id", type=int, help="Only this status id")
    p.add_argument("-n", "--limit", type=int, help="Stop after this many statuses")

    # groups
    p = subparsers.add_parser("groups", help="List groups")
    p.add_argument("-n", "--limit", type=int, help="Stop after this many groups")

    return parser


# ============================================================================
# Main Entry Point
# ============================================================================

# Command dispatch table
COMMANDS = {
    "user": lambda c, a: cmd_user(c, a.id, a.json),
    "users": lambda c, a: cmd_list(c.users.list(size=a.limit), "Users", a.json),
    "statuses": lambda c, a: cmd_list(
        c.get_statuses(id=a.id, size=a.limit), "Statuses", a.json
    ),
    "groups": lambda c, a: cmd_list(c.groups.list(size=a.limit), "Groups", a.json),
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    if args.verbose:
        configure_logging(level=logging.DEBUG if args.verbose == 1 else TRACE)

    try:
        client = PingboardClient(access_token=args.token, max_tries=args.max_tries)
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    try:
        return COMMANDS[args.command](client, args)  # type: ignore[no-untyped-call]
    except APIError as e:
        print(f"Error: HTTP {e.status_code} {e.reason}", file=sys.stderr)
        return 1
    except PingboardError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
