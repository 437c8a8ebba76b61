from __future__ import annotations
from typing import Callable, Optional, Sequence

from rich.console import Console

InputFn = Callable[[str], str]


def get_input(prompt: str = "> ", reader: InputFn = input) -> str:
    """Get user input with prompt"""
    return reader(prompt).strip()


def get_choice(prompt: str, choices: Sequence[str], *, console: Optional[Console] = None,
               reader: InputFn = input, default: Optional[str] = None) -> str:
    """Get a choice from user with validation (number, name or unique prefix)."""
    out = console or Console()
    while True:
        out.print(prompt)
        for i, choice in enumerate(choices, 1):
            out.print(f"  {i}. {choice}")

        response = get_input("Choose (number or name): ", reader).lower()

        if default and response == "":
            return default

        if response.isdigit():
            idx = int(response) - 1
            if 0 <= idx < len(choices):
                return choices[idx]

        for choice in choices:
            if response == choice.lower():
                return choice

        matches = [c for c in choices if response and c.lower().startswith(response)]
        if len(matches) == 1:
            return matches[0]

        out.print("[red]Invalid choice. Please try again.[/red]")


def confirm(prompt: str, default: Optional[bool] = None, *, console: Optional[Console] = None,
            reader: InputFn = input) -> bool:
    """Get yes/no confirmation from user"""
    out = console or Console()
    suffix = " (y/n): "
    if default is True:
        suffix = " (Y/n): "
    elif default is False:
        suffix = " (y/N): "

    while True:
        response = get_input(prompt + suffix, reader).lower()
        if response in ['y', 'yes']:
            return True
        if response in ['n', 'no']:
            return False
        if response == "" and default is not None:
            return default

        out.print("Please enter 'y' or 'n'.")
