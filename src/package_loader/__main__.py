# src/package_loader/__main__.py
from __future__ import annotations

import argparse
import sys

from package_loader.cli.argparse_model import add_model_to_parser
from package_loader.cli.listing import ListCommand, handle_list
from package_loader.exceptions import PackageLoaderError


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="package-loader")
    sub = parser.add_subparsers(dest="command", required=True)

    list_p = sub.add_parser("list", help="List discovered packages.")
    add_model_to_parser(list_p, ListCommand)

    ns = parser.parse_args(argv)

    if ns.command == "list":
        data = vars(ns)
        data.pop("command", None)
        cmd = ListCommand.model_validate(data)
        try:
            handle_list(cmd)
        except PackageLoaderError as e:
            print(f"package-loader: error: {e}", file=sys.stderr)
            raise SystemExit(2) from e
        return

    raise RuntimeError(f"Unknown command: {ns.command}")


if __name__ == "__main__":
    main()
