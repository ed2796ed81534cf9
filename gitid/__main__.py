"""Main entry point for direct module execution."""

import logging
import sys

from .cli import cli
from .system_utils import LOG_FORMAT
from .ui_common import print_error

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    """Log warnings to stderr; the cli group adds gitid.log once the config dir is known."""
    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(logging.WARNING if "--debug" not in sys.argv else logging.DEBUG)

    logging.basicConfig(
        level=logging.INFO,
        format=LOG_FORMAT,
        handlers=[stream],
    )


def main() -> None:
    """Main entry point."""
    setup_logging()
    try:
        logger.debug("Starting gitid")
        cli()
    except Exception as e:
        logger.error("Fatal error", exc_info=True)
        print_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
