"""CLI entry point; registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="hotspot-lens",
    help="Hotspot Lens - find the riskiest files in a repository's history",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"hotspot-lens {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """Rank files by change frequency, churn, recency and author spread."""


# Import subcommands to register them
from .analyze import analyze as _analyze  # noqa: F401, E402
from .file import file as _file  # noqa: F401, E402
from .cache import cache_info as _cache_info, cache_clear as _cache_clear  # noqa: F401, E402
from .serve import serve as _serve  # noqa: F401, E402
