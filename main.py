"""
Entry point for the calculator hub.

Usage:
    python main.py                      # launches the web app at localhost:5000
    python main.py --cli                # pick a calculator in the terminal
    python main.py --cli bmi-calculator # run one calculator in the terminal
    python main.py --catalog            # print the parsed catalog as JSON
    python main.py --search mortgage    # search the catalog
"""

import argparse
import logging
import os

import config as cfg


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Calculator Hub: finance, health, real estate and everyday calculators",
    )
    parser.add_argument(
        "--cli",
        nargs="?",
        const="",
        default=None,
        metavar="SLUG",
        help="Run in terminal mode instead of launching the web app",
    )
    parser.add_argument(
        "--catalog",
        nargs="?",
        const=cfg.CATALOG_PATH,
        default=None,
        metavar="PATH",
        help="Print the parsed calculator catalog as JSON and exit",
    )
    parser.add_argument(
        "--search",
        metavar="QUERY",
        help="List catalog calculators matching QUERY and exit",
    )
    parser.add_argument(
        "--pdf",
        metavar="PATH",
        help="Save a PDF report of the CLI result to PATH",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=cfg.WEB_PORT,
        help=f"Web server port (default {cfg.WEB_PORT})",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.catalog is not None:
        import catalog
        print(catalog.catalog_to_json(catalog.load_catalog(args.catalog)))
    elif args.search is not None:
        import catalog
        from calculators import is_implemented
        entries = catalog.search_calculators(catalog.load_catalog(), args.search)
        if not entries:
            print(f"No calculators match '{args.search}'.")
        for e in entries:
            marker = "*" if is_implemented(e.slug) else " "
            print(f" {marker} {e.name:<40} {e.slug}")
    elif args.cli is not None:
        from cli import run_cli
        run_cli(args.cli or None, pdf_path=args.pdf)
    else:
        from app import run_web
        run_web(port=args.port)


if __name__ == "__main__":
    main()
