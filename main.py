"""daylog demo service — emits mixed-level records through a daily-rotating sink."""

import logging
import os
import random
import signal
import sys
import time
import uuid

from daylog.errors import ConfigError
from daylog.logger import boot

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [daylog] %(levelname)s %(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config", "logs.yaml")

_running = True


def _signal_handler(sig, _frame):
    global _running
    logger.info("Shutdown signal received (signal %d), stopping...", sig)
    _running = False


SERVICES = ["auth-api", "order-svc", "payment-gw", "user-svc", "catalog-api"]
MESSAGES = {
    "trace": ["Entering request handler", "Parsed request body"],
    "debug": ["Token validation started", "Cache lookup for session %s"],
    "info": ["Request %s processed successfully", "Health check passed"],
    "warn": ["Slow query detected (>500ms)", "Connection pool nearing capacity"],
    "error": ["Failed to connect to database", "Timeout waiting for upstream %s"],
}
WEIGHTS = {"trace": 1, "debug": 2, "info": 6, "warn": 2, "error": 1}


def emit_demo_record(daily_logger) -> str:
    method = random.choices(list(WEIGHTS), weights=list(WEIGHTS.values()))[0]
    template = random.choice(MESSAGES[method])
    service = random.choice(SERVICES)
    args = (uuid.uuid4().hex[:8],) if "%s" in template else ()
    getattr(daily_logger, method)(f"[{service}] " + template, *args)
    return method


def main():
    signal.signal(signal.SIGINT, _signal_handler)
    signal.signal(signal.SIGTERM, _signal_handler)

    config_path = sys.argv[1] if len(sys.argv) > 1 else os.environ.get("CONFIG_PATH", DEFAULT_CONFIG)
    try:
        daily_logger = boot(config_path)
    except ConfigError as e:
        logger.error("Invalid configuration: %s", e)
        sys.exit(2)
    except OSError as e:
        logger.error("Could not open log file: %s", e)
        sys.exit(1)

    counts: dict[str, int] = {}
    try:
        while _running:
            method = emit_demo_record(daily_logger)
            counts[method] = counts.get(method, 0) + 1
            time.sleep(0.2)
    except KeyboardInterrupt:
        pass

    daily_logger.println("demo finished:", sum(counts.values()), "records")
    daily_logger.close()
    logger.info("Shut down cleanly. Emitted per level: %s", counts)


if __name__ == "__main__":
    main()
