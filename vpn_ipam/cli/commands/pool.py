"""
Address pool commands.
"""

from pathlib import Path
from typing import Optional

import typer

from vpn_ipam.exceptions import PoolExhausted
from vpn_ipam.factory import build_pools, build_registry
from vpn_ipam.lib.config import load_config
from vpn_ipam.peers.models import allowed_ips

app = typer.Typer(help="Address pool commands")


@app.command()
def show(
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default: VPN_IPAM_CONFIG_PATH or /etc/vpn-ipam/ipam.conf)"),
):
    """
    Show the configured pools and their capacity.
    """
    try:
        cfg = load_config(config)
        pools = build_pools(cfg)
        for index, pool in enumerate(pools):
            typer.echo(
                f"pool={index} prefix={pool.prefix} family=IPv{pool.prefix.version} "
                f"size={pool.prefix.length()} reserved={pool.reserved_count()} capacity={pool.capacity()}"
            )

    except Exception as e:
        typer.echo(f"Error showing pools: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def simulate(
    peers: int = typer.Option(..., "--peers", help="Number of synthetic peers to register", min=1),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default: VPN_IPAM_CONFIG_PATH or /etc/vpn-ipam/ipam.conf)"),
):
    """
    Register synthetic peers against fresh in-memory pools.

    Nothing is persisted; this only shows which addresses peers would get.
    """
    try:
        registry = build_registry(load_config(config))

        for i in range(peers):
            peer_id = f"peer-{i + 1}"
            try:
                addresses = registry.acquire(peer_id)
            except PoolExhausted as e:
                typer.echo(f"{peer_id} rejected: {e}")
                typer.echo(f"Registered {registry.count()} of {peers} peers")
                raise typer.Exit(1)
            typer.echo(f"{peer_id} {','.join(allowed_ips(addresses))}")

        typer.echo(f"Registered {registry.count()} of {peers} peers")

    except typer.Exit:
        raise
    except Exception as e:
        typer.echo(f"Error simulating peers: {e}", err=True)
        raise typer.Exit(1)
