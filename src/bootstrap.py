"""Database bootstrap entrypoint.

Validates the environment, then creates the timeline schema and seeds the
reference vendors. Exits with status 1 on any failure.

    python src/bootstrap.py
"""
from __future__ import annotations

import sys
from pathlib import Path

# Add src directory to python path if running as script
if __name__ == "__main__":
    src_path = Path(__file__).parent
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))

from core.config import get_settings
from core.logging_config import setup_logging, get_logger
from provisioning.provisioner import run_provisioning

LOGGER = get_logger(__name__)


def main() -> None:
    """Run the provisioning sequence."""
    setup_logging()

    try:
        settings = get_settings()
        setup_logging(level=settings.log_level, json_format=settings.json_logs)
        run_provisioning(settings)
    except Exception as exc:
        LOGGER.critical("Fatal error: %s", exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
