"""todolist CLI entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from . import __version__
from .config import Config
from .state import LocalStorage, PersistenceAdapter, TaskStore
from .utils.logger import setup_logging


def build_store(storage_dir: Path, key: str) -> TaskStore:
    """Wire a TaskStore to the durable slot under storage_dir."""
    adapter = PersistenceAdapter(LocalStorage(storage_dir), key=key)
    return TaskStore(adapter)


@click.command()
@click.version_option(version=__version__)
@click.option(
    "--storage-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the task storage (default: from config)",
)
@click.option("--key", default=None, help="Storage key for the task list")
@click.option("--log-level", default=None, help="Log level (debug, info, warning, error)")
def main(storage_dir: Optional[Path], key: Optional[str], log_level: Optional[str]) -> None:
    """todolist - a small terminal task list."""
    config = Config()
    setup_logging(
        log_level or config.get("general.log_level", "info"),
        config.get_path("general.log_file"),
    )

    store = build_store(
        storage_dir or config.get_path("storage.dir"),
        key or config.get("storage.key", "myTodoApp_todos"),
    )

    try:
        from .interactive import TodoApp
    except Exception as exc:  # pragma: no cover - defensive fallback
        click.echo(f"Unable to start interactive mode: {exc}")
        raise SystemExit(1)

    TodoApp(store).run()


if __name__ == "__main__":
    main()
