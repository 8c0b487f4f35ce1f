"""
Command-line interface.

    python -m cascading validate CONFIG [--fields FIELDS.json]
    python -m cascading simulate CONFIG --schema SCHEMA.json [--values VALUES.json] [--changed FIELD]
"""

import argparse
import asyncio
import sys
from typing import Any, List, Optional

import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .catalog import AzureDevOpsFieldCatalog, StaticFieldCatalog, StaticProjectService
from .config import load_settings, setup_logging
from .exceptions import CascadeError
from .hints import HintService
from .host import InMemoryWorkItemForm
from .loader import load_cascade_configuration, load_json_document
from .service import CascadingFieldsService
from .validation import CascadeValidationService

logger = structlog.get_logger(__name__)

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cascading",
        description="Validate and simulate cascading field rules",
    )
    parser.add_argument("--env-file", help="Path to a .env file with settings")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate = subparsers.add_parser("validate", help="Check field names against the project field catalog")
    validate.add_argument("config", help="Cascade configuration JSON file")
    validate.add_argument(
        "--fields",
        help="JSON list of known field reference names (skips the remote catalog)",
    )

    simulate = subparsers.add_parser("simulate", help="Run cascades over an in-memory form")
    simulate.add_argument("config", help="Cascade configuration JSON file")
    simulate.add_argument("--schema", required=True, help="JSON object: field -> allowed values")
    simulate.add_argument("--values", help="JSON object: field -> current value")
    simulate.add_argument("--changed", help="Cascade only this field instead of the whole form")
    return parser


def _validation_service(args: argparse.Namespace, settings) -> CascadeValidationService:
    if args.fields:
        names = load_json_document(args.fields)
        if not isinstance(names, list):
            raise CascadeError(f"'{args.fields}' must contain a JSON list of field names")
        return CascadeValidationService(StaticProjectService("local"), StaticFieldCatalog(names))

    if not settings.has_remote_catalog:
        raise CascadeError(
            "No field catalog: pass --fields or set AZURE_DEVOPS_ORG_URL and AZURE_DEVOPS_PROJECT"
        )
    catalog = AzureDevOpsFieldCatalog(
        settings.organization_url,
        personal_access_token=settings.personal_access_token,
        api_version=settings.api_version,
        timeout_seconds=settings.http_timeout,
    )
    return CascadeValidationService(
        StaticProjectService(settings.effective_project_id, settings.project),
        catalog,
    )


async def _validate(args: argparse.Namespace, settings) -> int:
    configuration = load_cascade_configuration(args.config)
    validator = _validation_service(args, settings)
    invalid_fields = await validator.validate_cascades(configuration)

    if invalid_fields is None:
        console.print("[green]Configuration is valid[/green]")
        return 0

    console.print(f"[red]{len(invalid_fields)} unknown field(s):[/red]")
    for field_name in invalid_fields:
        console.print(f"  - {escape(field_name)}")
    return 1


def _print_hint(field_name: str, field_value: Any, hint: str) -> None:
    console.print(f"[cyan]Hint[/cyan] {escape(f'{field_name}={field_value}: {hint}')}")


async def _simulate(args: argparse.Namespace) -> int:
    configuration = load_cascade_configuration(args.config)
    schema = load_json_document(args.schema)
    values = load_json_document(args.values) if args.values else {}
    if not isinstance(schema, dict) or not isinstance(values, dict):
        raise CascadeError("--schema and --values must contain JSON objects")

    form = InMemoryWorkItemForm(allowed_values=schema, values=values)
    service = CascadingFieldsService(form, configuration, hint_service=HintService(notifier=_print_hint))

    if args.changed:
        await service.perform_cascading(args.changed)
    else:
        await service.cascade_all()

    table = Table(title="Allowed values")
    table.add_column("Field")
    table.add_column("Value")
    table.add_column("Allowed")
    for field_name, allowed in form.filtered_values.items():
        table.add_row(field_name, str(form.values.get(field_name, "")), ", ".join(allowed) or "(none)")
    console.print(table)

    if form.error:
        console.print(f"[red]{escape(form.error)}[/red]")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.env_file)
    setup_logging(settings.log_level, settings.log_dir or None)

    try:
        if args.command == "validate":
            return asyncio.run(_validate(args, settings))
        return asyncio.run(_simulate(args))
    except CascadeError as e:
        logger.error("Command failed", command=args.command, error=str(e))
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
