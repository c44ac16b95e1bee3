"""Small Typer helpers shared by the CLI commands."""

from __future__ import annotations

from typing import List, NoReturn, Optional

import typer


def bad_parameter(message: str, *, param_hint: Optional[str] = None) -> NoReturn:
    """Raise :class:`typer.BadParameter` naming ``param_hint`` when given."""

    if param_hint is None:
        raise typer.BadParameter(message)
    raise typer.BadParameter(message, param_hint=param_hint)


def check_choice(value: Optional[str], choices: tuple[str, ...], param_hint: str) -> Optional[str]:
    """Return ``value`` if it is ``None`` or one of ``choices``."""

    if value is not None and value not in choices:
        bad_parameter(f"must be one of {', '.join(choices)}, got {value!r}", param_hint=param_hint)
    return value


def check_frequencies(values: List[float], param_hint: str) -> List[float]:
    """Reject zero, negative and non-finite frequencies."""

    for value in values:
        if not value > 0 or value == float("inf"):
            bad_parameter(f"frequency must be positive and finite, got {value:g}", param_hint=param_hint)
    return values


def fail(message: str, code: int = 1) -> NoReturn:
    """Print ``message`` to stderr in red and exit with ``code``."""

    typer.secho(message, err=True, fg=typer.colors.RED)
    raise typer.Exit(code=code)
