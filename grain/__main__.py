"""Module entrypoint for ``python -m grain``.

All argument parsing and runtime setup happen in ``grain.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
