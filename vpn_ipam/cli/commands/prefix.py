"""
Prefix inspection commands.
"""

import typer

from vpn_ipam.exceptions import BroadcastUnsupported
from vpn_ipam.net.pool import AddressPool
from vpn_ipam.net.prefix import MAX_PREFIX_SIZE, PrefixBlock

app = typer.Typer(help="Prefix inspection commands")


@app.command()
def show(cidr: str = typer.Argument(..., help="Prefix (e.g., 10.8.0.1/24)")):
    """
    Show the layout of a prefix.

    Prints the family, size, network and broadcast addresses, and how many
    addresses a pool built from it could lease.
    """
    try:
        block = PrefixBlock.parse(cidr)
        if block.is_empty:
            raise ValueError("Prefix cannot be empty")

        try:
            broadcast = str(block.broadcast_address())
        except BroadcastUnsupported:
            broadcast = "n/a"

        typer.echo(f"Prefix:    {block}")
        typer.echo(f"Family:    IPv{block.version}")
        typer.echo(f"Length:    /{block.prefixlen}")
        typer.echo(f"Size:      {block.length()}")
        typer.echo(f"Network:   {block.network_address()}")
        typer.echo(f"Broadcast: {broadcast}")
        typer.echo(f"Leasable:  {AddressPool(block).capacity()}")

    except Exception as e:
        typer.echo(f"Error showing prefix: {e}", err=True)
        raise typer.Exit(1)


@app.command("list")
def list_addresses(
    cidr: str = typer.Argument(..., help="Prefix (e.g., 10.8.0.1/24)"),
    limit: int = typer.Option(0, "--limit", help="Print at most this many addresses (0: all)"),
    max_size: int = typer.Option(MAX_PREFIX_SIZE, "--max-size", help="Refuse blocks larger than this"),
):
    """
    List every address of a prefix in ascending order.
    """
    try:
        block = PrefixBlock.parse(cidr, max_size=max_size)
        addresses = block.addresses()
        if limit > 0:
            addresses = addresses[:limit]
        for addr in addresses:
            typer.echo(str(addr))

    except Exception as e:
        typer.echo(f"Error listing prefix: {e}", err=True)
        raise typer.Exit(1)
