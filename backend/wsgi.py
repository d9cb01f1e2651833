# backend/wsgi.py
#
# Serving entrypoint. The overdue scanner starts here rather than in
# create_app so CLI commands and test apps never run a timer. Every process
# that imports this module starts its own scanner: run one worker, or set
# OVERDUE_SCANNER_ENABLED=false on all but one.
import logging

from paytrack import create_app
from paytrack.components import get_components
from paytrack.config import Config

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = create_app()

if app.config.get("OVERDUE_SCANNER_ENABLED"):
    get_components(app).scanner.start()


if __name__ == "__main__":
    # Reloader off so the overdue scanner thread starts exactly once
    app.run(host="0.0.0.0", port=app.config["PORT"], use_reloader=False)
