"""
TFSight CLI Entry Point

Allows running the package as a module: python -m tfsight
"""

from tfsight.cli import app


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
