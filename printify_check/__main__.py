# printify_check/__main__.py
"""Entry point for `python -m printify_check`."""

from printify_check.cli import app

if __name__ == "__main__":
    app()
