"""
Crieur CLI - Command-line interface for the realtime session.

Provides commands for:
- listen: open the notification channel and print notices
- token: show, store or clear the persisted credential

All output via SystemReporter with Emoji.
"""

import argparse
import asyncio
import signal
import sys
from datetime import datetime, timezone
from typing import Optional

from shared.reporter.emojis import Emoji
from shared.reporter.system_reporter import SystemReporter

from crieur.application.routing import subscribe
from crieur.config.settings import PROFILES, Settings, load_config
from crieur.di import Container
from crieur.domain.value_objects import WILDCARD, ConnectionState, Event


def build_settings(args: argparse.Namespace) -> Settings:
    """Load settings for --env and apply command-line overrides."""
    settings = load_config(env=args.env)
    overrides = {}
    if getattr(args, "profile", None):
        overrides["profile"] = args.profile
    if getattr(args, "server", None):
        overrides["server_url"] = args.server
    if args.verbose:
        overrides["verbose"] = 3
        overrides["log_level"] = "debug"
    if not overrides:
        return settings
    return Settings(**{**settings.model_dump(), **overrides})


async def listen(
    container: Container, duration: Optional[float], show_events: bool
) -> int:
    """
    Run a session until interrupted (or for `duration` seconds).

    Returns:
        Exit code (0 = clean stop, 1 = no credential)
    """
    reporter = container.reporter
    session = container.session

    def on_state(old: ConnectionState, new: ConnectionState) -> None:
        emoji = {
            ConnectionState.CONNECTED: Emoji.NETWORK.CONNECTED,
            ConnectionState.CONNECTING: Emoji.NETWORK.CONNECTING,
            ConnectionState.FAILED: Emoji.NETWORK.FAILED,
        }.get(new, Emoji.NETWORK.DISCONNECTED)
        reporter.info(f"{emoji} {old.value} -> {new.value}", context="CLI")

    session.add_state_listener(on_state)

    channel = await session.start()
    if channel is None:
        reporter.error(
            f"{Emoji.AUTH.MISSING} No usable credential. "
            f"Store one with: crieur token --access <token> --refresh <token>",
            context="CLI",
        )
        return 1

    if channel.connection_state == ConnectionState.FAILED:
        reporter.warning(
            f"{Emoji.SYSTEM.OFFLINE} Channel failed: {channel.last_error}",
            context="CLI",
        )

    if show_events:

        def print_event(event: Event) -> None:
            reporter.info(
                f"{Emoji.NETWORK.RECEIVE} #{event.sequence} {event.type} {event.payload}",
                context="CLI",
            )

        subscribe(channel, WILDCARD, print_event)

    store = container.notification_store
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Signal handlers are unavailable on this platform
            pass

    reporter.info(
        f"{Emoji.SYSTEM.READY} Listening as '{container.settings.profile}' "
        f"on {channel.url} (Ctrl+C to stop)",
        context="CLI",
    )
    try:
        await asyncio.wait_for(stop.wait(), timeout=duration)
    except asyncio.TimeoutError:
        pass
    finally:
        await container.reset()

    reporter.info(
        f"{Emoji.SYSTEM.SHUTDOWN} Stopped ({len(store)} notifications, "
        f"{store.unread_count()} unread)",
        context="CLI",
    )
    return 0


async def token(container: Container, args: argparse.Namespace) -> int:
    """
    Show, store or clear the persisted credential.

    Returns:
        Exit code
    """
    reporter = container.reporter
    settings = container.settings
    store = container.credential_store
    keys = [settings.access_token_key, settings.refresh_token_key]

    if args.clear:
        await store.delete_many(keys)
        reporter.info(f"{Emoji.SYSTEM.CLEANUP} Credential cleared", context="CLI")
        return 0

    if args.access or args.refresh:
        values = {}
        if args.access:
            values[settings.access_token_key] = args.access
        if args.refresh:
            values[settings.refresh_token_key] = args.refresh
        await store.set_many(values)
        reporter.info(f"{Emoji.AUTH.TOKEN} Credential stored", context="CLI")

    credential = await container.token_guard.load_credential()
    decoder = container.token_decoder

    reporter.info(f"{Emoji.AUTH.TOKEN} {credential!r}", context="CLI")
    if credential.has_access_token:
        try:
            claims = decoder.decode(credential.access_token)
        except ValueError as e:
            reporter.warning(f"{Emoji.ERROR.WARNING} {e}", context="CLI")
        else:
            expires = claims.expires_at
            reporter.info(
                f"{Emoji.INFO} identity={claims.identity} role={claims.role} "
                f"expires={expires.isoformat() if expires else 'never'}",
                context="CLI",
            )
            if decoder.is_expired(credential.access_token):
                reporter.warning(
                    f"{Emoji.AUTH.EXPIRED} Access token expired "
                    f"(now={datetime.now(timezone.utc).isoformat()})",
                    context="CLI",
                )

    if args.refresh_now:
        new_token = await container.token_guard.refresh(force=True)
        await container.reset()
        if new_token is None:
            reporter.error(f"{Emoji.AUTH.REVOKED} Refresh failed", context="CLI")
            return 1
        reporter.info(f"{Emoji.AUTH.REFRESHED} Refreshed", context="CLI")
    return 0


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="crieur",
        description="Real-time order notifications client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  crieur token --access <jwt> --refresh <token>   # Store a credential
  crieur token                                    # Show credential status
  crieur token --refresh-now                      # Force a token refresh
  crieur listen --profile seller                  # Listen as the seller app
  crieur listen --events --duration 60            # Print raw events for 60s
        """,
    )
    parser.add_argument(
        "--env",
        default=None,
        help="Environment: production, development or test (default: $ENV)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(
        dest="command", help="Command to run", required=True
    )

    listen_parser = subparsers.add_parser("listen", help="Run a realtime session")
    listen_parser.add_argument("--profile", choices=PROFILES, help="Client profile")
    listen_parser.add_argument("--server", help="Backend URL override")
    listen_parser.add_argument(
        "--duration", type=float, default=None, help="Stop after N seconds"
    )
    listen_parser.add_argument(
        "--events", action="store_true", help="Print every raw event"
    )

    token_parser = subparsers.add_parser("token", help="Manage the credential")
    token_parser.add_argument("--access", help="Store this access token")
    token_parser.add_argument("--refresh", help="Store this refresh token")
    token_parser.add_argument(
        "--refresh-now", action="store_true", help="Refresh the access token now"
    )
    token_parser.add_argument(
        "--clear", action="store_true", help="Delete the stored credential"
    )

    args = parser.parse_args(argv)

    try:
        settings = build_settings(args)
    except ValueError as e:
        # pydantic ValidationError is a ValueError
        print(f"{Emoji.ERROR.VALIDATION_ERROR} Invalid configuration: {e}")
        return 2

    reporter = SystemReporter.from_level_name(
        name="crieur_cli",
        log_level=settings.log_level,
        log_dir=settings.log_dir,
        verbose=settings.verbose,
    )
    container = Container(settings, reporter=reporter)

    try:
        if args.command == "listen":
            return asyncio.run(listen(container, args.duration, args.events))
        if args.command == "token":
            return asyncio.run(token(container, args))
        return 1
    except KeyboardInterrupt:
        reporter.info(f"{Emoji.SYSTEM.SHUTDOWN} Interrupted", context="CLI")
        return 130
    finally:
        reporter.close()


if __name__ == "__main__":
    sys.exit(main())
