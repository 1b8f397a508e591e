#!/usr/bin/env python3
# validate_data.py — check an option catalog JSON before pointing MARKETSIM_CATALOG at it
import json, sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
DATA_DIR = ROOT / "data"
sys.path.insert(0, str(ROOT))

from marketsim.catalog import catalog_from_dict, default_catalog, flatten_catalog, validate_catalog  # noqa: E402


def read_json_multi(*candidates):
    for p in candidates:
        if p.exists():
            with p.open("r", encoding="utf-8") as f:
                return json.load(f), p
    return None, None


def main():
    args = [Path(a) for a in sys.argv[1:]]
    data, path = read_json_multi(*(args or [DATA_DIR / "catalog.json"]))
    if data is None:
        if args:
            print(f"ERROR: catalog not found: {args[0]}", file=sys.stderr)
            sys.exit(2)
        print("[INFO] data/catalog.json not found — validating built-in catalog.")
        catalog, label = default_catalog(), "<default>"
    elif not isinstance(data, dict):
        print(f"ERROR: {path} must contain an object of category -> options", file=sys.stderr)
        sys.exit(1)
    else:
        catalog, label = catalog_from_dict(data), str(path)

    errors = validate_catalog(catalog)
    print(f"== Catalog: {label} ==")
    print(f"categories: {len(catalog)}  options: {len(flatten_catalog(catalog))}")
    if errors:
        for e in errors:
            print(f"[ERROR] {e}")
        sys.exit(1)
    print("Catalog OK ✅")


if __name__ == "__main__":
    main()
