"""Command-line front end for the Auth Rocket client"""

import argparse
import asyncio
import json
import logging
import os
import sys
from typing import List, Optional

import httpx
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

import settings
from auth_rocket import AuthConfig, AuthError, AuthSession, User, UserCredentials

logger = logging.getLogger(__name__)

console = Console()


def setup_logging(debug: bool = False, log_file: str = "auth_debug.log") -> None:
    """Configure the root logger

    With debug enabled, everything is logged to the console and appended
    to log_file; otherwise only LOG_LEVEL and above reaches the console.
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if debug:
        root_logger.setLevel(logging.DEBUG)
        log_path = os.path.abspath(log_file)
        file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        logger.info(f"Debug logging enabled - appending to {log_path}")
    else:
        root_logger.setLevel(getattr(logging, str(settings.LOG_LEVEL).upper(), logging.INFO))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Auth Rocket client CLI")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    parser.add_argument("--base-url", default=None, help="Override auth service URL (default: from config)")
    parser.add_argument("--client-id", default=None, help="Client ID (default: AUTH_CLIENT_ID)")
    parser.add_argument("--client-secret", default=None, help="Client secret (default: AUTH_CLIENT_SECRET)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (("register", "Create an account and sign in"), ("login", "Sign in")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("username")
        sub.add_argument("--password", "-p", default=None, help="Password (prompted if omitted)")

    subparsers.add_parser("whoami", help="Show the signed-in user")
    subparsers.add_parser("logout", help="Sign out and forget the stored token")

    delete = subparsers.add_parser("delete", help="Delete a user account")
    delete.add_argument("user_id", type=int)

    request = subparsers.add_parser("request", help="Make an authenticated request")
    request.add_argument("method")
    request.add_argument("url")
    request.add_argument("--json", dest="json_body", default=None, help="JSON request body")

    return parser


def print_user(user: Optional[User]) -> None:
    if user is None:
        console.print("[yellow]Not signed in[/yellow]")
        return

    table = Table(title="Current user", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Username", user.username)
    table.add_row("App", user.app)
    if user.id is not None:
        table.add_row("ID", str(user.id))
    console.print(table)


async def run_command(args: argparse.Namespace, session: AuthSession) -> int:
    """Run one CLI command against the session

    Returns:
        Process exit code
    """
    if args.command in ("register", "login"):
        password = args.password or Prompt.ask("Password", password=True)
        credentials = UserCredentials(username=args.username, password=password)
        if args.command == "register":
            await session.register(credentials)
            console.print("[green][OK][/green] Account created")
        else:
            await session.login(credentials)
            console.print("[green][OK][/green] Signed in")
        print_user(session.current_user)
        return 0

    if args.command == "logout":
        session.logout()
        console.print("[green][OK][/green] Signed out")
        return 0

    # Remaining commands need the session from a previous run
    user = await session.restore_session()

    if args.command == "whoami":
        print_user(user)
        return 0 if user else 1

    if args.command == "delete":
        await session.delete_user(args.user_id)
        console.print(f"[green][OK][/green] Deleted user {args.user_id}")
        return 0

    if args.command == "request":
        kwargs = {}
        if args.json_body is not None:
            kwargs["json"] = json.loads(args.json_body)
        data = await session.authenticated_request(args.method.upper(), args.url, **kwargs)
        if isinstance(data, (dict, list)):
            console.print_json(data=data)
        elif data is not None:
            console.print(data)
        return 0

    console.print(f"[red]Unknown command:[/red] {args.command}")
    return 2


async def _main_async(args: argparse.Namespace) -> int:
    config = AuthConfig(
        client_id=args.client_id or settings.AUTH_CLIENT_ID,
        client_secret=args.client_secret or settings.AUTH_CLIENT_SECRET,
        base_url=args.base_url,
    )
    async with AuthSession(config) as session:
        return await run_command(args, session)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        return asyncio.run(_main_async(args))
    except AuthError as e:
        console.print(f"[red]ERROR:[/red] {e}")
    except httpx.HTTPStatusError as e:
        console.print(f"[red]ERROR:[/red] Request failed (HTTP {e.response.status_code})")
    except httpx.HTTPError as e:
        console.print(f"[red]ERROR:[/red] Request failed: {e}")
    except json.JSONDecodeError as e:
        console.print(f"[red]ERROR:[/red] Invalid --json body: {e}")
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
    return 1


if __name__ == "__main__":
    sys.exit(main())
