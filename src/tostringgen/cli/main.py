"""
tostringgen CLI - Main entry point.

Provides commands for generating toString() methods in Java source files and
for finding classes that lack one.
"""

import logging
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tostringgen.config.loader import (
    ConfigurationError,
    create_config_from_args,
    generate_default_config,
    load_config_from_yaml,
)
from tostringgen.config.models import ToStringGenConfig
from tostringgen.generator import TO_STRING_SIGNATURE, GenerationError, GenerationStatus, generate
from tostringgen.host.java.source_file import JavaSourceFile
from tostringgen.inspection.checker import MissingMethodInspection
from tostringgen.templates.library import (
    DEFAULT_TEMPLATE,
    get_template,
    list_templates,
    load_template_file,
)

app = typer.Typer(
    name="tostringgen",
    help="Generate toString() methods for Java classes from templates",
    no_args_is_help=True,
)

console = Console()


# =============================================================================
# Helper Functions
# =============================================================================


def configure_logging(verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=log_level, format="%(name)s: %(message)s")


def validate_path(path: str, must_exist: bool = True) -> Path:
    """Validate and return a Path object."""
    p = Path(path)
    if must_exist and not p.exists():
        raise typer.BadParameter(f"Path does not exist: {path}")
    return p


def load_config(config: Optional[str]) -> ToStringGenConfig:
    if config:
        return load_config_from_yaml(validate_path(config))
    return ToStringGenConfig()


def line_offset(text: str, line: int) -> int:
    """Return the offset of the first character of a 1-based line."""
    if line < 1:
        raise typer.BadParameter(f"Line numbers start at 1, got {line}")
    offset = 0
    for _ in range(line - 1):
        offset = text.find("\n", offset)
        if offset < 0:
            raise typer.BadParameter(f"File has fewer than {line} lines")
        offset += 1
    return offset


# =============================================================================
# Commands
# =============================================================================


@app.command("generate")
def generate_command(
    file: str = typer.Argument(..., help="Java source file"),
    class_name: Optional[str] = typer.Option(None, "--class", "-c", help="Class to generate into (default: class at caret, else first class)"),
    template: Optional[str] = typer.Option(None, "--template", "-t", help="Built-in template name"),
    template_file: Optional[str] = typer.Option(None, "--template-file", help="Path to a custom template"),
    insert: Optional[str] = typer.Option(None, "--insert", "-i", help="Insert policy (at-caret/after-equals-hashcode/last)"),
    conflict: Optional[str] = typer.Option(None, "--conflict", help="Conflict policy (replace/duplicate/cancel)"),
    caret: Optional[int] = typer.Option(None, "--caret", help="Caret offset in the file"),
    line: Optional[int] = typer.Option(None, "--line", "-l", help="Place the caret at the start of this line"),
    getters: Optional[bool] = typer.Option(None, "--getters/--no-getters", help="Let getter methods participate"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to configuration YAML file"),
    in_place: bool = typer.Option(False, "--in-place", help="Write the result back to the file instead of printing it"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Generate a toString() method into a Java class.

    Examples:
        tostringgen generate Person.java
        tostringgen generate Person.java -t string_builder --insert last --in-place
        tostringgen generate Person.java --line 12 --conflict duplicate
    """
    configure_logging(verbose)

    try:
        settings = create_config_from_args(
            template=template,
            insert_policy=insert,
            conflict_policy=conflict,
            include_getters=getters,
            base=load_config(config),
        )
        path = validate_path(file)
        source = JavaSourceFile.from_path(path)
        if line is not None:
            caret = line_offset(source.text, line)
        if caret is not None:
            source = JavaSourceFile.parse(source.text, caret_offset=caret, path=path)

        if class_name:
            clazz = source.find_class(class_name)
            if clazz is None:
                raise ConfigurationError(f"Class '{class_name}' not found in {file}")
        else:
            clazz = source.class_at(caret) if caret is not None else None
            clazz = clazz or (source.classes[0] if source.classes else None)
            if clazz is None:
                raise ConfigurationError(f"No class declared in {file}")

        if template_file:
            template_source = load_template_file(validate_path(template_file))
        else:
            template_source = get_template(settings.generation.template)

        if verbose:
            console.print(f"[cyan]{clazz.qualified_name}:[/cyan] {settings.describe()}")

        result = generate(
            source,
            clazz,
            template_source,
            insert_policy=settings.generation.insert_policy,
            conflict_policy=settings.generation.conflict_policy,
            filter_config=settings.filter,
            signature=TO_STRING_SIGNATURE.with_name(settings.generation.method_name),
            config=settings,
        )
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)
    except GenerationError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    method_name = settings.generation.method_name
    if result.status == GenerationStatus.CANCELLED:
        console.print(f"[yellow]{clazz.name} already has {method_name}(), nothing changed.[/yellow]")
        return
    if result.status == GenerationStatus.EMPTY:
        console.print(f"[yellow]{clazz.name} has no fields or getters to use, nothing changed.[/yellow]")
        return

    if in_place:
        source.write(path)
        console.print(f"[green]✓[/green] Generated {method_name}() in {clazz.name} ({path})")
    else:
        # Plain echo: Java text like 'String[]' must not go through rich markup
        typer.echo(source.text, nl=False)


@app.command()
def templates():
    """
    List the built-in templates.
    """
    table = Table(title="Built-in Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Default", justify="center")

    for info in list_templates():
        default = "[green]✓[/green]" if info.name == DEFAULT_TEMPLATE else ""
        table.add_row(info.name, info.description, default)

    console.print(table)


@app.command()
def check(
    files: List[str] = typer.Argument(..., help="Java source files to check"),
    config: Optional[str] = typer.Option(None, "--config", help="Path to configuration YAML file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """
    Report classes that have fields but no toString() method.

    Exits with status 1 when any class is reported.
    """
    configure_logging(verbose)

    try:
        settings = load_config(config)
        inspection = MissingMethodInspection(
            settings.inspection, settings.filter, settings.generation.method_name
        )
        problems = []
        for file in files:
            source = JavaSourceFile.from_path(validate_path(file))
            problems.extend((file, p) for p in inspection.check_file(source))
    except ConfigurationError as e:
        console.print(f"[bold red]Configuration Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1)

    if not problems:
        console.print(f"[green]✓[/green] No problems found in {len(files)} file(s)")
        return

    table = Table(title="Missing Methods")
    table.add_column("File", style="cyan")
    table.add_column("Line", justify="right")
    table.add_column("Problem")
    for file, problem in problems:
        table.add_row(file, str(problem.line), problem.message)
    console.print(table)
    raise typer.Exit(1)


@app.command("init-config")
def init_config(
    output: str = typer.Argument("./tostringgen.yaml", help="Output path for config file"),
):
    """
    Generate a default configuration file.

    Creates a tostringgen.yaml with sensible defaults that you can customize.
    """
    output_path = Path(output)

    if output_path.exists():
        if not typer.confirm(f"{output} already exists. Overwrite?"):
            console.print("[yellow]Cancelled.[/yellow]")
            raise typer.Abort()

    generate_default_config(output_path)
    console.print(f"[green]✓[/green] Generated configuration file: {output}")
    console.print("\nEdit this file to customize generation and inspection settings.")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
