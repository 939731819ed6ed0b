"""CLI for hash-runner."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .constants import CONFIG_FILENAMES, DEFAULT_STORE_FILE
from .errors import HashRunnerError
from .runner import hash_runner
from .templates import create_config_yaml, create_gitignore_entry


app = typer.Typer(help="""\
Run a command only when tracked files changed since the last run.
Not a file watcher: each invocation hashes the configured files, compares
them with the stored digests and skips the command when nothing changed.""")

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Send debug logging to stderr when --verbose is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


@app.callback(invoke_without_command=True)
def main_command(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to the configuration file (default: search upward from cwd)"
    ),
    force: bool = typer.Option(False, "--force", "-f", help="Skip the comparison and run the command"),
    silent: bool = typer.Option(False, "--silent", "-s", help="Suppress status output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
):
    """Hash tracked files and run the configured command if they changed.

    Examples:
        # Use the nearest .hash-runner.yaml
        hash-runner

        # Explicit config, always run
        hash-runner --config build/.hash-runner.yaml --force
    """
    _configure_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    try:
        code = hash_runner(
            config,
            force=True if force else None,
            silent=True if silent else None,
            console=console,
        )
    except HashRunnerError as e:
        err_console.print(f"[red]✗[/red] Error running hash runner: {escape(str(e))}")
        raise typer.Exit(1)

    raise typer.Exit(code)


@app.command()
def init(
    path: Optional[str] = typer.Argument(None, help="Directory to initialize (default: current directory)"),
    command: str = typer.Option("make build", "--command", "-x", help="Command to run on change"),
):
    """Create a starter .hash-runner.yaml."""
    target_dir = Path(path).resolve() if path else Path.cwd()
    if not target_dir.is_dir():
        err_console.print(f"[red]✗[/red] Not a directory: {target_dir}")
        raise typer.Exit(1)

    existing = [name for name in CONFIG_FILENAMES if (target_dir / name).exists()]
    if existing:
        err_console.print(f"[red]✗[/red] Config already exists: {target_dir / existing[0]}")
        raise typer.Exit(1)

    config_path = target_dir / CONFIG_FILENAMES[0]
    config_path.write_text(create_config_yaml(command))
    console.print(f"[green]✓[/green] Created {config_path}")

    gitignore_path = target_dir / ".gitignore"
    if gitignore_path.exists():
        content = gitignore_path.read_text()
        if DEFAULT_STORE_FILE not in content.splitlines():
            with gitignore_path.open("a") as f:
                f.write(create_gitignore_entry())
            console.print("[green]✓[/green] Updated .gitignore")


def main():
    """Entry point for CLI."""
    app()


if __name__ == "__main__":
    main()
