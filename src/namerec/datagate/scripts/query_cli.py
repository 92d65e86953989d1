#!/usr/bin/env python3
"""Console script to normalize query descriptors and optionally send them to the engine."""

import asyncio
import json
import sys
from typing import Annotated
from typing import Any

import httpx
import typer

from namerec.datagate.core.config import Settings
from namerec.datagate.core.exceptions import DataGateError
from namerec.datagate.core.exceptions import DataGateValidationError
from namerec.datagate.gateway import RequestGateway
from namerec.datagate.query.constants import RelationKind
from namerec.datagate.query.descriptor import QueryDescriptor
from namerec.datagate.query.relations import expand_relation
from namerec.datagate.query.relations import parse_relation

app = typer.Typer(help='Normalize query descriptors and optionally forward them to the execution engine.')


@app.command()
def normalize(
    input_file: Annotated[
        typer.FileText | None,
        typer.Argument(help='Descriptor JSON file (defaults to stdin)'),
    ] = None,
    relation: Annotated[
        str | None,
        typer.Option('--relation', '-r', help='Relation JSON to expand onto the descriptor'),
    ] = None,
    kind: Annotated[
        RelationKind,
        typer.Option('--kind', '-k', help='Relation kind'),
    ] = RelationKind.ONE_TO_MANY,
    page: Annotated[
        int | None,
        typer.Option('--page', help='Page number (1-based), sets limit/offset'),
    ] = None,
    per_page: Annotated[
        int,
        typer.Option('--per-page', help='Rows per page'),
    ] = 20,
    pretty: Annotated[
        bool,
        typer.Option('--pretty/--no-pretty', help='Pretty print output'),
    ] = True,
    send: Annotated[
        bool,
        typer.Option('--send', help='Execute via the engine configured in DATAGATE_* variables'),
    ] = False,
    api_key: Annotated[
        str | None,
        typer.Option('--api-key', envvar='DATAGATE_API_KEY', help='Caller credential used with --send'),
    ] = None,
) -> None:
    """
    Validate a descriptor and print the normalized engine payload.

    Examples:

        # Normalize a descriptor
        echo '{"project_id": 1, "id_instancia": 10, "table": "pedidos"}' | datagate-query

        # Expand a one-to-many relation and take the second page
        datagate-query query.json -r '{"table": "clientes", "foreign_key": "cliente_id"}' --page 2

        # Execute against the engine
        datagate-query query.json --send --api-key secret
    """
    input_text = (input_file.read() if input_file else sys.stdin.read()).strip()
    if not input_text:
        typer.echo('Error: No input provided', err=True)
        raise typer.Exit(1)

    try:
        payload = _load_json(input_text, 'descriptor')
        descriptor = build_descriptor(payload, relation, kind, page, per_page)
    except DataGateValidationError as e:
        typer.echo(f'Error: Invalid descriptor: {e!s}', err=True)
        if e.field_name:
            typer.echo(f'  field: {e.field_name}', err=True)
        raise typer.Exit(1)

    if not send:
        typer.echo(_dump(descriptor.to_payload(), pretty))
        return

    try:
        result = asyncio.run(send_descriptor(descriptor, api_key, Settings()))
    except DataGateError as e:
        typer.echo(f'Error: {type(e).__name__}: {e!s}', err=True)
        raise typer.Exit(1)

    typer.echo(_dump(result, pretty))


def _load_json(text: str, name: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        msg = f'{name} is not valid JSON: {e}'
        raise DataGateValidationError(msg, field_name=name) from e


def _dump(value: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(value, indent=2, ensure_ascii=False)
    return json.dumps(value, ensure_ascii=False)


def build_descriptor(
    payload: Any,
    relation: str | None,
    kind: RelationKind,
    page: int | None,
    per_page: int,
) -> QueryDescriptor:
    """
    Build the final descriptor from CLI input.

    Args:
        payload: Parsed descriptor JSON
        relation: Relation JSON text (None = no expansion)
        kind: Relation kind
        page: Page number (None = keep limit/offset from payload)
        per_page: Rows per page

    Returns:
        Validated QueryDescriptor

    Raises:
        DataGateValidationError: If any input is invalid
    """
    if not isinstance(payload, dict):
        msg = 'descriptor must be a JSON object'
        raise DataGateValidationError(msg, field_name='descriptor')

    descriptor = QueryDescriptor.from_payload(payload)
    if relation:
        spec = parse_relation(_load_json(relation, 'relation'), kind)
        descriptor = expand_relation(descriptor, spec)

    if page is not None:
        if page < 1 or per_page < 1:
            msg = f'page and per-page must be >= 1, got {page} and {per_page}'
            raise DataGateValidationError(msg, field_name='page')
        descriptor.limit = per_page
        descriptor.offset = (page - 1) * per_page

    return descriptor


async def send_descriptor(
    descriptor: QueryDescriptor,
    api_key: str | None,
    settings: Settings,
    http_client: httpx.AsyncClient | None = None,
) -> Any:
    """
    Execute descriptor through a short-lived gateway.

    Args:
        descriptor: Descriptor to execute
        api_key: Caller credential
        settings: Gateway settings
        http_client: Optional preconfigured httpx client

    Returns:
        Rows as reported by the engine
    """
    gateway = RequestGateway.create(settings.to_gateway_config(), http_client=http_client)
    try:
        return await gateway.advanced_select(descriptor, api_key=api_key)
    finally:
        await gateway.aclose()


def main() -> None:
    """Entry point for the script."""
    app()


if __name__ == '__main__':
    main()
