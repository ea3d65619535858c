"""Interactive prompt primitives for Praxis CLI.

Each prompt returns either the chosen value or the CANCEL sentinel when
the user aborts (Ctrl-C or end of input). Callers must check with
is_cancel() after every prompt before doing anything else.
"""

import logging
from typing import Final

from pydantic import BaseModel
from rich.prompt import Confirm, Prompt

from praxis.utils.console import console, print_warning

logger = logging.getLogger(__name__)


class Cancel:
    """Marker type for a prompt the user aborted."""

    def __repr__(self) -> str:
        return "CANCEL"


CANCEL: Final = Cancel()


def is_cancel(value: object) -> bool:
    """Return True if a prompt result is the CANCEL sentinel."""
    return value is CANCEL


class PromptOption(BaseModel):
    """A single choice in a select or multi-select prompt.

    Attributes:
        value: Value returned when this option is chosen.
        label: Text shown to the user.
        hint: Optional dimmed text shown after the label.
    """

    value: str
    label: str
    hint: str | None = None


def _format_option(index: int, option: PromptOption, marker: str = "") -> str:
    hint = f" [dim]{option.hint}[/dim]" if option.hint and option.hint != option.label else ""
    return f"  [cyan]{index}.[/cyan] {marker}{option.label}{hint}"


def select(message: str, options: list[PromptOption]) -> str | Cancel:
    """Ask the user to pick one option.

    Args:
        message: Question to display.
        options: Available options, shown numbered from 1.

    Returns:
        The value of the chosen option, or CANCEL.
    """
    console.print(f"[bold]{message}[/bold]")
    for index, option in enumerate(options, start=1):
        console.print(_format_option(index, option))

    choices = [str(index) for index in range(1, len(options) + 1)]
    try:
        answer = Prompt.ask("Choose", choices=choices, console=console)
    except (KeyboardInterrupt, EOFError):
        logger.debug(f"Select prompt cancelled: {message}")
        return CANCEL

    return options[int(answer) - 1].value


def multiselect_grouped(
    message: str,
    groups: dict[str, list[PromptOption]],
    initial_values: list[str],
) -> list[str] | Cancel:
    """Ask the user to toggle options organised in labelled groups.

    The list is redrawn after every answer. Entering numbers (comma or space
    separated) toggles those options, 'a' selects everything, 'n' clears the
    selection and an empty answer confirms.

    Args:
        message: Question to display.
        groups: Mapping of group label to its options.
        initial_values: Values that start out selected.

    Returns:
        Selected values in display order (possibly empty), or CANCEL.
    """
    ordered = [option for options in groups.values() for option in options]
    all_values = [option.value for option in ordered]
    selected = {value for value in initial_values if value in all_values}

    while True:
        console.print(f"[bold]{message}[/bold]")
        index = 0
        for label, options in groups.items():
            console.print(f"[bold magenta]{label}[/bold magenta]")
            for option in options:
                index += 1
                marker = "[green]◉[/green] " if option.value in selected else "◯ "
                console.print(_format_option(index, option, marker))

        try:
            answer = Prompt.ask(
                "Toggle numbers, 'a' for all, 'n' for none, Enter to confirm",
                default="",
                show_default=False,
                console=console,
            )
        except (KeyboardInterrupt, EOFError):
            logger.debug(f"Multi-select prompt cancelled: {message}")
            return CANCEL

        answer = answer.strip().lower()
        if not answer:
            return [value for value in all_values if value in selected]
        if answer == "a":
            selected = set(all_values)
            continue
        if answer == "n":
            selected = set()
            continue

        tokens = answer.replace(",", " ").split()
        if not all(token.isdigit() and 1 <= int(token) <= len(ordered) for token in tokens):
            print_warning(f"Enter numbers between 1 and {len(ordered)}.")
            continue

        for token in tokens:
            value = ordered[int(token) - 1].value
            selected ^= {value}


def confirm(message: str, default: bool = False) -> bool | Cancel:
    """Ask a yes/no question.

    Args:
        message: Question to display.
        default: Answer used when the user just presses Enter.

    Returns:
        The answer, or CANCEL.
    """
    try:
        return Confirm.ask(message, default=default, console=console)
    except (KeyboardInterrupt, EOFError):
        logger.debug(f"Confirm prompt cancelled: {message}")
        return CANCEL
