"""Prefork: one listening socket served by a worker process per CPU.

Each worker announces itself at startup, so after ``python app.py`` the
log shows one "parent" line and one "child" line per worker, and the
task manager shows the extra processes.

Run:
    python app.py
    # or: warbler run app:app --prefork
"""

import logging

from warbler import App, AppConfig, is_child
from warbler.server.runner import configure_logging

logger = logging.getLogger(__name__)

config = AppConfig(
    host="localhost",
    port=3000,
    idle_timeout=5.0,
    prefork=True,
)
app = App(config=config)


@app.get("/")
def index() -> str:
    return "Hello, World!"


def process_role() -> str:
    return "child" if is_child() else "parent"


@app.on_startup
def announce() -> None:
    logger.info("I'm %s process", process_role())


if __name__ == "__main__":
    configure_logging(config.log_level)
    logger.info("I'm %s process", process_role())
    app.run(app_path="app:app")
