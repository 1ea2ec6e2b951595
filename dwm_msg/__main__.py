"""
dwm-msg: communicate with dwm over its IPC socket.

Usage:
    dwm-msg [-s SOCKET] [-i] [-t run_command] <name> [args...]
    dwm-msg -t get_monitors | get_tags | get_layouts
    dwm-msg -t get_dwm_client <window_id>
    dwm-msg [-i] [-m] -t subscribe <event> [event...]

Exit codes:
  0 - Success
  1 - Connection lost or protocol failure while talking to dwm
  2 - Usage error
  3 - Could not connect to the dwm socket
"""

import sys
from typing import Sequence

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from . import __version__
from .classifier import is_unsigned_int, saturating_int
from .client import DwmClient
from .errors import DwmIpcError, IPCConnectionError
from .logging_config import setup_logging
from .models import DEFAULT_SOCKET_PATH, KNOWN_EVENTS, ClientConfig, MessageType


EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONNECTION = 3

MESSAGE_TYPES = {
    "command": MessageType.RUN_COMMAND,
    "run_command": MessageType.RUN_COMMAND,
    "get_monitors": MessageType.GET_MONITORS,
    "get_tags": MessageType.GET_TAGS,
    "get_layouts": MessageType.GET_LAYOUTS,
    "get_dwm_client": MessageType.GET_DWM_CLIENT,
    "subscribe": MessageType.SUBSCRIBE,
}

EPILOG = "\b\nMessage types:\n" + "\n".join([
    "  run_command <name> [args...]  Run an IPC command",
    "  get_monitors                  Get monitor properties",
    "  get_tags                      Get list of tags",
    "  get_layouts                   Get list of layouts",
    "  get_dwm_client <window_id>    Get dwm client properties",
    "  subscribe [events...]         Subscribe to specified events",
    "",
    "\b",
    "Events:",
] + [f"  {event}" for event in KNOWN_EVENTS])


def complete_args(ctx: click.Context, param: click.Parameter, incomplete: str):
    """Offer known event names when completing a subscribe invocation."""
    type_name = (ctx.params.get("type_name") or "").lower()
    if MESSAGE_TYPES.get(type_name) is not MessageType.SUBSCRIBE:
        return []
    return [event for event in KNOWN_EVENTS if event.startswith(incomplete)]


def validate_request(message_type: MessageType, args: Sequence[str], monitor: bool) -> None:
    """Reject malformed invocations before connecting.

    Raises:
        click.UsageError: On any invalid combination
    """
    if monitor and message_type is not MessageType.SUBSCRIBE:
        raise click.UsageError('The monitor option -m is used with "-t subscribe" exclusively.')

    if message_type is MessageType.RUN_COMMAND and not args:
        raise click.UsageError("No command specified")
    if message_type is MessageType.GET_DWM_CLIENT:
        if not args:
            raise click.UsageError("Expected the window id")
        if not is_unsigned_int(args[0]):
            raise click.UsageError("Expected unsigned integer argument")
    if message_type is MessageType.SUBSCRIBE and not args:
        raise click.UsageError("Expected event name")


def dispatch(client: DwmClient, message_type: MessageType, args: Sequence[str]) -> None:
    """Send the selected request and consume its replies."""
    if message_type is MessageType.RUN_COMMAND:
        client.run_command(args[0], args[1:])
    elif message_type is MessageType.GET_DWM_CLIENT:
        client.get_dwm_client(saturating_int(args[0]))
    elif message_type is MessageType.SUBSCRIBE:
        client.subscribe(args)
        if client.config.monitor:
            client.monitor()
        client.next_event()
    else:
        client.query(message_type)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"], "allow_interspersed_args": False},
    epilog=EPILOG,
)
@click.option('-s', '--socket', 'socket_path', envvar='DWM_MSG_SOCKET',
              default=str(DEFAULT_SOCKET_PATH), show_default=True,
              help='Path of the dwm IPC socket')
@click.option('-t', '--type', 'type_name', type=click.Choice(list(MESSAGE_TYPES), case_sensitive=False),
              default='run_command', show_default=True, help='Message type to send')
@click.option('-i', '--ignore-reply', is_flag=True,
              help="Don't print \"success\" replies from run_command and subscribe")
@click.option('-m', '--monitor', is_flag=True,
              help='With subscribe, keep printing events instead of exiting after the first one')
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging (INFO level)')
@click.option('--debug', is_flag=True, help='Enable debug logging (DEBUG level, includes frame dumps)')
@click.version_option(__version__, prog_name='dwm-msg')
@click.argument('args', nargs=-1, type=click.UNPROCESSED, shell_complete=complete_args)
def cli(socket_path: str, type_name: str, ignore_reply: bool, monitor: bool,
        verbose: bool, debug: bool, args: Sequence[str]):
    """Communicate with dwm, the suckless window manager."""
    logger = setup_logging(verbose=verbose, debug=debug)
    console = Console(stderr=True)

    message_type = MESSAGE_TYPES[type_name.lower()]
    validate_request(message_type, args, monitor)

    try:
        config = ClientConfig(socket_path=socket_path, ignore_reply=ignore_reply, monitor=monitor)
    except ValidationError as e:
        raise click.BadParameter(e.errors()[0]["msg"], param_hint="'-s' / '--socket'")

    try:
        with DwmClient.open(config, sys.stdout.buffer) as client:
            dispatch(client, message_type, args)

    except IPCConnectionError as e:
        console.print(f"[red]Error: {escape(e.message)}[/red]")
        if e.suggestion:
            console.print(f"[dim]Tip: {escape(e.suggestion)}[/dim]")
        sys.exit(EXIT_CONNECTION)
    except DwmIpcError as e:
        logger.debug(f"IPC failure: {e.to_dict()}")
        console.print(f"[red]Error talking to dwm: {escape(e.message)}[/red]")
        if e.suggestion:
            console.print(f"[dim]{escape(e.suggestion)}[/dim]")
        sys.exit(EXIT_FAILURE)
    except KeyboardInterrupt:
        console.print("\n[dim]Stopped[/dim]")
        sys.exit(EXIT_FAILURE)

    sys.exit(EXIT_OK)


if __name__ == '__main__':
    cli()
