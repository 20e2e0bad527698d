"""Allow running as: python -m typer_ai"""

from .cli import cli_main

if __name__ == "__main__":
    cli_main()
