"""loomgate CLI entrypoint."""

from loomgate.cli import app

if __name__ == "__main__":
    app()
