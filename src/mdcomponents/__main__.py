"""Console-script entry point for :mod:`mdcomponents`."""

from __future__ import annotations

from mdcomponents.cli import create_app


def main() -> None:
    """Run the ``mdcomponents`` command line.

    Example:
        >>> from mdcomponents.__main__ import main
        >>> main()  # doctest: +SKIP
    """

    app = create_app()
    app(prog_name="mdcomponents")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
