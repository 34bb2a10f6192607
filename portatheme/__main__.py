"""Entry point for ``python -m portatheme``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
