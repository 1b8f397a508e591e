#!/usr/bin/env python3
"""
Try the choice resolver from the command line.

  python scripts/resolve_probe.py "run some ads on instagram"
  python scripts/resolve_probe.py --catalog data/catalog.json "vegan stuff"
  python scripts/resolve_probe.py --list
"""
from __future__ import annotations
import argparse, json, logging, os, sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, ROOT)

from marketsim.catalog import flatten_catalog, load_catalog  # noqa: E402
from marketsim.choice_resolver import resolve  # noqa: E402


def main(argv=None):
    ap = argparse.ArgumentParser(description="Map free text to a MarketSim option code")
    ap.add_argument("choice", nargs="*", help="player text (joined with spaces)")
    ap.add_argument("--catalog", default=os.getenv("MARKETSIM_CATALOG"), help="catalog JSON path")
    ap.add_argument("--list", action="store_true", help="print the flattened catalog and exit")
    ap.add_argument("-v", "--verbose", action="store_true", help="show resolver debug log")
    args = ap.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")
    catalog = load_catalog(args.catalog)

    if args.list:
        for o in flatten_catalog(catalog):
            print(f"{o.code:<4} {o.category:<10} {o.title}")
        return 0

    if not args.choice:
        ap.error("choice text is required (or use --list)")

    result = resolve(" ".join(args.choice), catalog)
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 0 if result.chosen_option else 1


if __name__ == "__main__":
    sys.exit(main())
