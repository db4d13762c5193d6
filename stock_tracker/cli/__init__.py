"""CLI interface using Typer."""
