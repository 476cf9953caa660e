"""Module entrypoint for running Booktranslator as ``python -m booktranslator``."""

from __future__ import annotations

from booktranslator.cli import main


if __name__ == "__main__":
    main()
