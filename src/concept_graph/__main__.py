"""Allow ``python -m concept_graph``."""

from .cli import app

if __name__ == "__main__":
    app()
