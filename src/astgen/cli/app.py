from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from astgen.config import load_options
from astgen.core.batch import run_batch, sink_paths
from astgen.core.export import export_file
from astgen.exceptions import AstgenError, ConfigError
from astgen.log_config import setup_logging

app = typer.Typer(
    name="astgen",
    help="Generate flattened JSON ASTs from source files.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

console = Console()
err_console = Console(stderr=True)


@app.command()
def generate(
    source: Annotated[str, typer.Argument(help="File to parse, or glob pattern in batch mode.", metavar="INPUT")],
    output: Annotated[
        str | None,
        typer.Option("--output", "-o", help="Output file in normal mode, output prefix in batch mode."),
    ] = None,
    method: Annotated[bool, typer.Option("--method", "-m", help="Parse a single method instead of a full file.")] = False,
    batch: Annotated[bool, typer.Option("--batch", help="Treat INPUT as a glob and process every match.")] = False,
    min_nodes: Annotated[int | None, typer.Option(help="Minimum number of nodes (batch mode only).")] = None,
    max_nodes: Annotated[int | None, typer.Option(help="Maximum number of nodes (batch mode only).")] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Language name or alias; detected from the extension by default.")
    ] = None,
    workers: Annotated[int | None, typer.Option("--workers", "-j", help="Parallel workers (batch mode only).")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress to stderr.")] = False,
) -> None:
    """Parse INPUT and print its flattened AST, or export a whole batch."""
    setup_logging(verbose=verbose)

    if not batch:
        try:
            export_file(source, output, method_only=method, language=language)
        except AstgenError as e:
            err_console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise typer.Exit(1) from None
        except OSError as e:
            err_console.print(f"[red]Error:[/red] cannot write {output}: {e.strerror or e}")
            raise typer.Exit(1) from None
        return

    if output is None:
        raise typer.BadParameter("is required in batch mode", param_hint="'--output' / '-o'")

    try:
        options = load_options(
            min_nodes=min_nodes,
            max_nodes=max_nodes,
            method_only=method,
            language=language,
            workers=workers,
        )
    except ConfigError as e:
        raise typer.BadParameter(str(e)) from None

    try:
        result = run_batch(source, output, options)
    except AstgenError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1) from None

    console.print(
        f"[green]Processed[/green] {result.total_files} files: "
        f"{result.accepted_count} accepted, {result.rejected_count} rejected"
    )
    for path in sink_paths(output):
        console.print(f"  {path}", markup=False, highlight=False)


def main() -> None:
    app()
