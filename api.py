# api.py — thin runner for the MarketSim backend
from __future__ import annotations

import logging
import os

# App factory lives in marketsim/app.py
from marketsim.app import create_app

app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    port = int(os.environ.get("PORT", "5000"))
    debug = os.environ.get("DEBUG", "true").lower() in {"1", "true", "yes", "y"}
    app.run(host="0.0.0.0", port=port, debug=debug)
