"""Entry point for `python -m shootout` command."""

import sys
from collections.abc import Callable

import click

HELP = """shootout - Multiplayer shootout coordinator

Usage:
    python -m shootout <command> [options]

Commands:
    version     Show version information
    server      Run the coordinator server
    agent       Run cowboy agents against a coordinator
    config      Configuration management
    help        Show this help message

Options:
    -h, --help  Show help message
"""


def _server_cli() -> click.Command:
    from shootout.adapters.web.cli import cli

    return cli


def _agent_cli() -> click.Command:
    from shootout.agent.cli import run_agent

    return run_agent


def _config_cli() -> click.Command:
    from shootout.cli.config import config_cli

    return config_cli


# command name -> (click command loader, keep the command name in argv)
COMMANDS: dict[str, tuple[Callable[[], click.Command], bool]] = {
    "server": (_server_cli, True),
    "agent": (_agent_cli, False),
    "config": (_config_cli, False),
}


def main(args: list[str] | None = None) -> int:
    """Dispatch ``args`` to a subcommand and return the exit code."""
    if args is None:
        args = sys.argv[1:]

    if not args or args[0] in ("-h", "--help", "help"):
        print(HELP)
        return 0

    name, rest = args[0], args[1:]
    if name == "version":
        from shootout import __version__

        print(f"shootout {__version__}")
        return 0

    if name not in COMMANDS:
        print(f"Unknown command: {name}")
        print(HELP)
        return 1

    loader, keep_name = COMMANDS[name]
    return run_click(loader(), [name, *rest] if keep_name else rest)


def run_click(command: click.Command, args: list[str]) -> int:
    """Run a click command with ``args`` and return its exit code."""
    try:
        command.main(args=args, prog_name="shootout", standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.exceptions.Abort:
        return 1
    except SystemExit as e:
        if e.code is None:
            return 0
        if isinstance(e.code, int):
            return e.code
        print(e.code, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
