"""
Entrypoint for running the API in development: `python -m api`.
In production run `api:create_app()` under a WSGI server instead.
"""
import logging
import os
from . import create_app

logger = logging.getLogger(__name__)

# APP_ENV selects the configuration class (handled in get_config())
app = create_app()

if __name__ == "__main__":
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8000"))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes")
    logger.info("Starting catalog API on %s:%s (env=%s)", host, port, app.config.get("APP_ENV"))
    app.run(host=host, port=port, debug=debug)
