from __future__ import annotations

import typer


class Console:
    def echo(self, message: str = "", err: bool = False) -> None:
        typer.echo(message, err=err)

    def badge(self, label: str, color: str, message: str, indent: str = "") -> None:
        typer.echo(f"{indent}{typer.style(f' {label} ', bg=color, fg=typer.colors.WHITE, bold=True)} {message}")

    def banner(self, text: str, color: str) -> None:
        typer.secho(f"**   {text}   **", bg=color, fg=typer.colors.WHITE, bold=True)

    def confirm(self, prompt: str, default: bool = False) -> bool:
        return typer.confirm(prompt, default=default)
