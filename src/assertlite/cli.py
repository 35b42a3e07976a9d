from __future__ import annotations

from pathlib import Path

import typer

app = typer.Typer(name="assertlite", help="Vendor assertlite into your project")


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output to terminal"
    ),
    debug_log: str | None = typer.Option(
        None, "--debug-log", help="Append debug output to this file"
    ),
):
    """Copy the assertions into a project so they can be used without a dependency."""
    from assertlite.verbose import setup_logger

    setup_logger(
        Path(debug_log) if debug_log is not None else None,
        verbose=verbose,
    )


@app.command()
def install(
    path: str = typer.Argument(
        help="Where to put the generated package, e.g. `.` or `src/myproject/_vendor`"
    ),
    dir: str = typer.Option(
        ".", "--dir", help="Project directory containing pyproject.toml"
    ),
):
    """Write <path>/assertlite with the assertions and the pytest plugin."""
    from assertlite.installer import install as run_install

    project_dir = Path(dir)
    try:
        result = run_install(path, project_dir)
    except FileNotFoundError as e:
        typer.echo(f"Error: manifest not found: {e.filename}", err=True)
        raise typer.Exit(1)
    except (ValueError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(f"Installed assertlite into {result.project} as {result.import_path}:")
    for written in result.written:
        typer.echo(f"  {written}")
    typer.echo(
        f'Enable the fixture with: pytest_plugins = ["{result.import_path}.plugin"]'
    )
