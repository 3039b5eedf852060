"""Allow ``python -m todone``."""

from .cli import app


if __name__ == "__main__":
    app()
