# src/websim/__main__.py
from __future__ import annotations

from websim.cli.commands import handle_command, parse_command


def main(argv: list[str] | None = None) -> None:
    handle_command(parse_command(argv))


if __name__ == "__main__":
    main()
