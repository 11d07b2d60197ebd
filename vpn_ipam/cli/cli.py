#!/usr/bin/env python3
"""
Main CLI entry point using Typer.
"""

import logging
import sys

import typer

from vpn_ipam.cli.commands import pool, prefix

app = typer.Typer(
    name="vpn-ipam",
    help="VPN address pool planning tool",
    add_completion=False,
)

# Add command groups
app.add_typer(prefix.app, name="prefix", help="Prefix inspection commands")
app.add_typer(pool.app, name="pool", help="Address pool commands")


@app.callback()
def callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """VPN address pool planning tool."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)


def main() -> int:
    """Main entry point."""
    try:
        app()
        return 0
    except KeyboardInterrupt:
        typer.echo("\nOperation cancelled by user", err=True)
        return 130
    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
