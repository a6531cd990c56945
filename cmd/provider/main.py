"""Entry point for the ncloud provider server.

Serves the data sources over HTTP (see internal/handlers/datasources.py).

  PORT               listen port (default 8080)
  NCLOUD_LOG_LEVEL   logging level (default INFO)
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from flask import Flask

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from internal.handlers.datasources import datasources_bp
from internal.provider.provider import NcloudProvider


def create_app(provider: NcloudProvider | None = None) -> Flask:
    app = Flask(__name__)
    app.config["NCLOUD_PROVIDER"] = provider or NcloudProvider()
    app.register_blueprint(datasources_bp)
    return app


def run() -> None:
    logging.basicConfig(
        level=os.getenv("NCLOUD_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    port = int(os.getenv("PORT", "8080"))
    app = create_app()
    logging.getLogger(__name__).info("ncloud provider listening on http://0.0.0.0:%s", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    run()
