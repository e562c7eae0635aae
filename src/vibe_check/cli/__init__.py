"""vibe-check command line: the typer app and its subcommands."""

import typer

app = typer.Typer(
    name="vibe-check",
    help="vibe-check - commit-stream analytics for AI-assisted coding sessions",
    add_completion=False,
    rich_markup_mode="rich",
)


# Importing the command modules registers them on ``app``
from .analyze import main as _main_callback  # noqa: F401, E402
from .calibrate import calibrate as _calibrate, retrain as _retrain  # noqa: F401, E402
from .level import level as _level  # noqa: F401, E402
from .sessions import sessions as _sessions  # noqa: F401, E402
