"""Entry point for ``python -m tubevault``."""

from tubevault.cli.typer_app import app

if __name__ == "__main__":
    app()
