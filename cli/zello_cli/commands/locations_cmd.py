from __future__ import annotations

import typer
from rich.table import Table
from zello_client import ApiError

from .. import console
from ..config import load_config
from ..formatting import format_timestamp, format_value, parse_coordinates
from ..http import make_client

app = typer.Typer(help="Location queries (admin session required).")


def _coordinates(value: str, option: str) -> list[str]:
    try:
        return parse_coordinates(value)
    except ValueError as e:
        console.err(f"Invalid {option}: {e}")
        raise typer.Exit(code=2)


@app.command("get")
def get_locations(
        northeast: str = typer.Option(..., "--northeast", help="North-east corner as LAT,LNG."),
        southwest: str = typer.Option(..., "--southwest", help="South-west corner as LAT,LNG."),
        name: str | None = typer.Option(None, "--name", help="Only this user."),
        filter_: str | None = typer.Option(None, "--filter", help="Server-side filter expression."),
        start: int = typer.Option(0, "--start", help="Index of the first result."),
        limit: int = typer.Option(0, "--max", help="Max results (0 = server default)."),
        host: str | None = typer.Option(None, "--host", help="Override server host."),
        profile: str | None = typer.Option(None, "--profile", help="Config profile to use."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    ne = _coordinates(northeast, "--northeast")
    sw = _coordinates(southwest, "--southwest")

    cfg = load_config()
    client = make_client(cfg, profile=profile, host_override=host)
    try:
        data = client.get_locations(ne, sw, name=name, filter_=filter_, start=start, limit=limit).raise_for_error().data
    except ApiError as e:
        console.err(f"Failed to query locations: {e}")
        raise typer.Exit(code=2)
    finally:
        client.close()

    if json_out:
        console.print_json(data)
        return

    table = Table(title="Locations")
    table.add_column("user", style="bold")
    table.add_column("latitude")
    table.add_column("longitude")
    table.add_column("accuracy")
    table.add_column("seen")

    for loc in data.get("locations") or []:
        table.add_row(
            str(loc.get("name") or loc.get("user") or "-"),
            format_value(loc.get("latitude")),
            format_value(loc.get("longitude")),
            format_value(loc.get("accuracy")),
            format_timestamp(loc.get("timestamp")),
        )

    console.console.print(table)
