"""Entry point for running asmxref as a module.

This allows running the application with:
    python -m asmxref [OPTIONS] COMMAND [ARGS]
"""

from asmxref.cli import app

if __name__ == "__main__":
    app()
