#!/usr/bin/env python3
"""
CLI for the DLD transaction engine

Commands:
    query           - Filtered, sorted, paginated transactions
    history         - Flip history for one unit fingerprint
    area-stats      - Per-area rollup (optionally filtered)
    building-stats  - Top buildings within an area
    market-stats    - Market-wide rollup
    search          - Area / building name search
    resolve-area    - Map a slug or alias to a DLD area name
    developer       - Resolve the developer of a project
    remote-query    - One page straight from the Dubai Pulse open API

Usage:
    python cli.py query --area jvc --min-size 1000 --limit 5
    python cli.py history "Marina Gate 1" --size 1000 --rooms "2 B/R"
    python cli.py --db /data/dld.db market-stats

All output is JSON. A store that cannot be opened exits with status 2.
"""

import json
import sys
from contextlib import contextmanager

import click

from api.contracts import parse_params
from api.contracts.pydantic_models import PropertyParams, TransactionsParams
from db.engine import StoreUnavailableError, TransactionStore
from services.area_resolver import is_known_alias, resolve_area_name
from services.developer_lookup import resolve_developer
from services.dubai_pulse_client import DubaiPulseClient, DubaiPulseError
from services.providers import StoreDataProvider
from utils.normalize import ValidationError, to_date

EXIT_INVALID = 1
EXIT_STORE_UNAVAILABLE = 2
EXIT_REMOTE_FAILED = 3


def _echo_json(payload) -> None:
    click.echo(json.dumps(payload, indent=2, default=str))


def _fail(message: str, code: int) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(code)


@contextmanager
def open_provider(ctx):
    """Open the store for one command and close it afterwards."""
    store = TransactionStore(ctx.obj.get("db_path"))
    try:
        store.open()
    except StoreUnavailableError as e:
        _fail(str(e), EXIT_STORE_UNAVAILABLE)
    try:
        yield StoreDataProvider(store)
    except StoreUnavailableError as e:
        _fail(str(e), EXIT_STORE_UNAVAILABLE)
    except ValidationError as e:
        _fail(str(e), EXIT_INVALID)
    finally:
        store.close()


def _parse(model, raw):
    try:
        return parse_params(model, {k: v for k, v in raw.items() if v is not None})
    except ValidationError as e:
        _fail(str(e), EXIT_INVALID)


@click.group()
@click.version_option(version="1.0.0", prog_name="dld")
@click.option("--db", "db_path", envvar="DLD_DATABASE_PATH", default=None,
              help="Path to the DLD SQLite store (default: DLD_DATABASE_PATH or data/dld.db)")
@click.pass_context
def cli(ctx, db_path):
    """DLD transactions CLI - query Dubai Land Department sales data."""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = db_path


@cli.command("query")
@click.option("--search")
@click.option("--area", help="Area name or alias (jvc, downtown, ...)")
@click.option("--building")
@click.option("--trans-group")
@click.option("--property-type")
@click.option("--property-sub-type")
@click.option("--usage", "property_usage")
@click.option("--reg-type")
@click.option("--from-date", help="YYYY-MM-DD")
@click.option("--to-date", help="YYYY-MM-DD")
@click.option("--min-price", type=float)
@click.option("--max-price", type=float)
@click.option("--min-size", type=float, help="sqft")
@click.option("--max-size", type=float, help="sqft")
@click.option("--developer")
@click.option("--limit", type=int, default=20, show_default=True)
@click.option("--offset", type=int, default=0, show_default=True)
@click.option("--sort-by", default="instance_date", show_default=True)
@click.option("--sort-order", default="DESC", show_default=True)
@click.pass_context
def query(ctx, **options):
    """Filtered, sorted, paginated transactions."""
    params = _parse(TransactionsParams, options)
    area = resolve_area_name(params.area) if params.area else None
    filters = params.to_filters(area=area)

    with open_provider(ctx) as provider:
        result = provider.query_transactions(
            filters,
            limit=params.limit,
            offset=params.offset,
            sort_by=params.sort_by,
            sort_order=params.sort_order,
        )
        _echo_json(result.to_dict())


@cli.command("history")
@click.argument("building")
@click.option("--size", type=float, help="Unit size in sqft (matched within 2%)")
@click.option("--rooms", help='Room label, e.g. "2 B/R"')
@click.option("--type", "property_type", help='Property sub-type, e.g. "Flat"')
@click.pass_context
def history(ctx, building, size, rooms, property_type):
    """
    Flip history for one unit.

    BUILDING: Exact DLD building name
    """
    params = _parse(PropertyParams, {
        "building": building, "size": size, "rooms": rooms, "property_type": property_type,
    })
    with open_provider(ctx) as provider:
        result = provider.get_property_history(
            params.building, size=params.size, rooms=params.rooms,
            property_type=params.property_type,
        )
        _echo_json(result.to_dict())
    if not result.found:
        sys.exit(EXIT_INVALID)


@cli.command("area-stats")
@click.argument("area", required=False)
@click.pass_context
def area_stats(ctx, area):
    """Per-area rollup; AREA (alias-resolved) filters by substring."""
    with open_provider(ctx) as provider:
        result = provider.get_area_stats(resolve_area_name(area) if area else None)
        _echo_json([s.to_dict() for s in result.data])


@cli.command("building-stats")
@click.argument("area")
@click.pass_context
def building_stats(ctx, area):
    """Top buildings within AREA (alias-resolved)."""
    with open_provider(ctx) as provider:
        result = provider.get_building_stats(resolve_area_name(area))
        _echo_json([s.to_dict() for s in result.data])


@cli.command("market-stats")
@click.pass_context
def market_stats(ctx):
    """Market-wide rollup over all sales."""
    with open_provider(ctx) as provider:
        _echo_json(provider.get_market_stats().data.to_dict())


@cli.command("search")
@click.argument("text")
@click.option("--limit", type=click.IntRange(1, 50), default=10, show_default=True)
@click.pass_context
def search(ctx, text, limit):
    """Area and building names containing TEXT."""
    with open_provider(ctx) as provider:
        result = provider.search_all(text, limit)
        _echo_json([h.to_dict() for h in result.data])


@cli.command("resolve-area")
@click.argument("name")
def resolve_area(name):
    """Map a slug or alias to its DLD area name. Does not touch the store."""
    _echo_json({
        "input": name,
        "area_name_en": resolve_area_name(name),
        "alias": is_known_alias(name),
    })


@cli.command("developer")
@click.option("--master-project")
@click.option("--project")
def developer(master_project, project):
    """Resolve the developer for a master project / project name."""
    _echo_json(resolve_developer(master_project, project).to_dict())


@cli.command("remote-query")
@click.option("--area", help="Exact DLD area name (aliases are resolved)")
@click.option("--from-date", "from_date_raw", help="YYYY-MM-DD")
@click.option("--to-date", "to_date_raw", help="YYYY-MM-DD, or YYYY-MM for the whole month")
@click.option("--trans-group")
@click.option("--property-type")
@click.option("--limit", type=click.IntRange(1, 1000), default=20, show_default=True)
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
def remote_query(area, from_date_raw, to_date_raw, trans_group, property_type, limit, offset):
    """
    One page from the Dubai Pulse open API, bypassing the local store.

    Needs DUBAI_PULSE_API_KEY and DUBAI_PULSE_API_SECRET.
    """
    try:
        start = to_date(from_date_raw, field="from_date")
        end = to_date(to_date_raw, field="to_date", month_end=True)
    except ValidationError as e:
        _fail(str(e), EXIT_INVALID)

    client = DubaiPulseClient()
    if not client.configured:
        _fail("DUBAI_PULSE_API_KEY / DUBAI_PULSE_API_SECRET not set", EXIT_REMOTE_FAILED)
    try:
        response = client.fetch_transactions(
            area=resolve_area_name(area) if area else None,
            limit=limit,
            offset=offset,
            from_date=start,
            to_date=end,
            trans_group=trans_group,
            property_type=property_type,
        )
    except DubaiPulseError as e:
        _fail(str(e), EXIT_REMOTE_FAILED)
    finally:
        client.close()

    _echo_json({
        "source": response.source,
        "total": response.total,
        "rows": [row.to_dict() for row in response.rows],
    })


if __name__ == "__main__":
    cli()
