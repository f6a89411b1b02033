"""Main CLI entry point for the Form Engine.

Provides form inspection, answer validation, interactive filling and the
stdio tool server from the command line.
"""

from pathlib import Path
from typing import Any
import json
import logging
import sys

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from form_engine import __version__
from form_engine.config import EngineSettings, build_engine, load_settings
from form_engine.engine.session_engine import FormEngine, current_question_path
from form_engine.forms.loader import load_forms
from form_engine.forms.ordering import derive_question_order, is_required, schema_for_path
from form_engine.forms.registry import FormRegistry
from form_engine.protocol.stdio import serve as serve_stdio
from form_engine.protocol.tools import ToolServer
from form_engine.sessions.base import FormSession, OverallValidity

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(version=__version__, prog_name="form-engine")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), help="YAML settings file")
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: str | None) -> None:
    """Form Engine - fill out JSON Schema backed forms step by step.

    Forms are registered from YAML/JSON files; sessions walk their questions
    in order and are validated after every answer.
    """
    ctx.ensure_object(dict)
    settings = load_settings(config_path)
    ctx.obj["verbose"] = verbose
    ctx.obj["settings"] = settings
    _configure_logging("DEBUG" if verbose else settings.log_level)


def _build_engine(ctx: click.Context, forms_dirs: tuple[str, ...] = ()) -> FormEngine:
    settings: EngineSettings = ctx.obj["settings"]
    if forms_dirs:
        settings = settings.model_copy(
            update={"forms_dirs": [*settings.forms_dirs, *forms_dirs]}
        )
    return build_engine(settings)


def _fail(ctx: click.Context, message: str, error: Exception) -> None:
    console.print(f"[red]{message}: {escape(str(error))}[/red]")
    if ctx.obj.get("verbose", False):
        import traceback
        console.print(traceback.format_exc())
    sys.exit(1)


def _load_answers(path: str) -> dict[str, Any]:
    with open(path) as f:
        if path.endswith(".json"):
            answers = json.load(f)
        else:
            answers = yaml.safe_load(f)
    if not isinstance(answers, dict):
        raise ValueError(f"Answers file must hold a mapping: {path}")
    return answers


@cli.command()
@click.option("--forms-dir", "-f", multiple=True, type=click.Path(exists=True), help="Form file or directory to load")
@click.pass_context
def list_forms(ctx: click.Context, forms_dir: tuple[str, ...]) -> None:
    """List available forms."""
    try:
        engine = _build_engine(ctx, forms_dir)
    except Exception as e:
        _fail(ctx, "Error loading forms", e)

    forms = engine.list_forms()
    if not forms:
        console.print("[yellow]No forms found[/yellow]")
        return

    table = Table(title="Available Forms")
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Name", style="green")
    table.add_column("Questions", justify="right")
    table.add_column("Description")

    for form in forms:
        description = form.summary().get("description", "")
        table.add_row(
            form.id,
            form.name,
            str(len(derive_question_order(form.schema_))),
            description[:50] + "..." if len(description) > 50 else description or "-",
        )

    console.print(table)


@cli.command()
@click.argument("form_file", type=click.Path(exists=True))
@click.pass_context
def show_order(ctx: click.Context, form_file: str) -> None:
    """Show the question order of the forms in a file.

    FORM_FILE is a YAML or JSON form definition file.
    """
    try:
        forms = load_forms(form_file, FormRegistry())
    except Exception as e:
        _fail(ctx, "Error loading file", e)

    for form in forms:
        schema = form.schema_
        table = Table(title=f"{form.name} ({form.id})")
        table.add_column("#", justify="right")
        table.add_column("Path", style="cyan", no_wrap=True)
        table.add_column("Type")
        table.add_column("Required")

        for i, path in enumerate(derive_question_order(schema)):
            field_schema = schema_for_path(schema, path) or {}
            field_type = field_schema.get("type", "-")
            if "format" in field_schema:
                field_type = f"{field_type} ({field_schema['format']})"
            table.add_row(
                str(i),
                path,
                str(field_type),
                "[red]*[/red]" if is_required(schema, path) else "",
            )

        console.print(table)


@cli.command()
@click.argument("form_file", type=click.Path(exists=True))
@click.argument("answers_file", type=click.Path(exists=True))
@click.option("--form-id", help="Form to validate against (defaults to the first form in FORM_FILE)")
@click.pass_context
def validate(ctx: click.Context, form_file: str, answers_file: str, form_id: str | None) -> None:
    """Validate a file of answers against a form.

    FORM_FILE is a YAML or JSON form definition file. ANSWERS_FILE is a YAML
    or JSON mapping of answers, either nested or keyed by dot path.
    """
    try:
        engine = _build_engine(ctx)
        forms = load_forms(form_file, engine.registry)
        if not forms:
            raise ValueError(f"No forms defined in {form_file}")

        session = engine.create_session(form_id or forms[0].id)
        engine.set_answers(session.session_id, _load_answers(answers_file))
        result = engine.run_schema_validation(session.session_id)
    except Exception as e:
        _fail(ctx, "Error validating answers", e)

    _print_session(session)
    for message in result.root_messages():
        console.print(f"  [red]ERROR[/red]: {escape(message)}")


@cli.command()
@click.argument("form_id")
@click.option("--forms-dir", "-f", multiple=True, type=click.Path(exists=True), help="Form file or directory to load")
@click.option("--user", "-u", help="User id to attach to the session")
@click.option("--output", "-o", type=click.Path(), help="Write the final session state to this JSON file")
@click.pass_context
def fill(
    ctx: click.Context,
    form_id: str,
    forms_dir: tuple[str, ...],
    user: str | None,
    output: str | None,
) -> None:
    """Fill out a form interactively, one question at a time.

    FORM_ID is the id of a registered form. Leave an answer blank to skip it.
    """
    try:
        engine = _build_engine(ctx, forms_dir)
        session = engine.create_session(form_id, user_id=user)
    except Exception as e:
        _fail(ctx, "Error starting session", e)

    schema = session.definition_snapshot.schema_
    console.print(Panel.fit(
        f"[cyan]{session.definition_snapshot.name}[/cyan]\n"
        f"Questions: {len(session.question_order)}",
        title="Form",
    ))

    while True:
        path = current_question_path(session)
        if path is None:
            break

        field_schema = schema_for_path(schema, path) or {}
        if field_schema.get("type") != "object":
            _ask(engine, session, path, field_schema, is_required(schema, path))

        if session.current_question_index >= len(session.question_order) - 1:
            break
        engine.move_to_next(session.session_id)

    result = engine.run_schema_validation(session.session_id)
    _print_session(session)
    for message in result.root_messages():
        console.print(f"  [red]ERROR[/red]: {escape(message)}")

    if output:
        Path(output).write_text(json.dumps(session.to_dict(), indent=2, default=str))
        console.print(f"[green]Wrote session to {output}[/green]")


def _ask(
    engine: FormEngine,
    session: FormSession,
    path: str,
    field_schema: dict[str, Any],
    required: bool,
) -> None:
    """Prompt for one answer until it validates or is skipped."""
    label = f"{path} ({field_schema.get('type', 'any')})"
    if required:
        label += " *"

    while True:
        raw = click.prompt(label, default="", show_default=False)
        if raw == "":
            return

        value = raw if field_schema.get("type") == "string" else _parse_answer(raw)
        engine.set_field_value(session.session_id, path, value)

        state = session.fields[path]
        if state.schema_valid:
            return
        for message in state.messages:
            console.print(f"  [red]{escape(message)}[/red]")


@cli.command()
@click.option("--forms-dir", "-f", multiple=True, type=click.Path(exists=True), help="Form file or directory to load")
@click.pass_context
def serve(ctx: click.Context, forms_dir: tuple[str, ...]) -> None:
    """Serve the form tools over stdio.

    Reads one JSON-RPC request per line from stdin and writes one response
    per line to stdout.
    """
    try:
        engine = _build_engine(ctx, forms_dir)
    except Exception as e:
        _fail(ctx, "Error loading forms", e)

    server = ToolServer(engine)
    serve_stdio(server, sys.stdin, sys.stdout)


def _parse_answer(raw: str) -> Any:
    """Read a typed answer (number, boolean, list...) from prompt text."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _print_session(session: FormSession) -> None:
    """Print a session's field states and overall result."""
    table = Table(title=f"Session {session.session_id}")
    table.add_column("Path", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_column("Valid")
    table.add_column("Messages")

    for path in session.question_order:
        state = session.fields.get(path)
        if state is None:
            continue
        table.add_row(
            path,
            "-" if path not in session.data else escape(json.dumps(session.data[path], default=str)),
            "[green]yes[/green]" if state.schema_valid else "[red]no[/red]",
            escape("; ".join(state.messages)) or "-",
        )

    console.print(table)

    if session.overall_validity == OverallValidity.VALID:
        status = "[green]VALID[/green]"
    else:
        status = "[red]INVALID[/red]"
    console.print(f"\n{session.form_id}: {status} ({session.status.value})")


if __name__ == "__main__":
    cli()
