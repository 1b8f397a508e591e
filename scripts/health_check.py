#!/usr/bin/env python3
"""
Basic repo health checks for MarketSim.

Runs on CI to catch common issues quickly WITHOUT starting a live server:
- Verifies key folders/files exist
- Greps the Flask factory and /health route definitions (regex, no import)
- Validates JSON files under data/ if present
"""

import os
import re
import sys
import json
from glob import glob

ROOT = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))

def assert_true(cond, msg):
    if not cond:
        print(f"[FAIL] {msg}")
        sys.exit(1)
    print(f"[OK] {msg}")

def file_contains(path, pattern):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return re.search(pattern, f.read(), flags=re.IGNORECASE | re.MULTILINE) is not None
    except FileNotFoundError:
        return False

def validate_json_files():
    data_dir = os.path.join(ROOT, "data")
    if not os.path.isdir(data_dir):
        print("[INFO] data/ not found — skipping JSON validation.")
        return
    errors = 0
    for p in glob(os.path.join(data_dir, "**", "*.json"), recursive=True):
        try:
            with open(p, "r", encoding="utf-8") as f:
                json.load(f)
        except (OSError, ValueError) as e:
            errors += 1
            print(f"[JSON ERROR] {p}: {e}")
    assert_true(errors == 0, "All JSON files under data/ parsed successfully")

def main():
    print("== MarketSim health check ==")
    pkg = os.path.join(ROOT, "marketsim")
    assert_true(os.path.isdir(pkg), "marketsim/ package exists")
    assert_true(os.path.isdir(os.path.join(ROOT, "tests")), "tests/ folder exists")

    app_py = os.path.join(pkg, "app.py")
    assert_true(os.path.isfile(app_py), "marketsim/app.py exists")
    assert_true(os.path.isfile(os.path.join(pkg, "choice_resolver.py")), "marketsim/choice_resolver.py exists")

    assert_true(file_contains(app_py, r"def\s+create_app\("), "Flask app factory is defined")
    assert_true(file_contains(app_py, r"@app\.get\(\s*[\"']/health[\"']"), "/health route is defined")
    assert_true(file_contains(app_py, r"[\"']/api/simulate[\"']"), "/api/simulate route is defined")

    validate_json_files()

    print("All basic checks passed ✅")

if __name__ == "__main__":
    main()
