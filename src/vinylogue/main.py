"""
Vinylogue - Album Card Generator
Main entry point.
"""

import sys
from pathlib import Path

try:
    _package = __package__
except NameError:
    _package = None

if not _package:
    _script_path = Path(__file__).resolve()
    src_path = _script_path.parent.parent
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))
    from vinylogue.core import setup_logging
    from vinylogue.ui.cli import VinylogueCLI
else:
    from .core import setup_logging
    from .ui.cli import VinylogueCLI

logger = setup_logging()


def main(args=None) -> int:
    """Main entry point."""
    logger.debug("Starting Vinylogue")
    try:
        cli = VinylogueCLI()
        return cli.run(args)
    except KeyboardInterrupt:
        logger.debug("Application interrupted by user")
        raise
    except Exception:
        logger.exception("Unhandled exception occurred")
        raise
    finally:
        logger.debug("Application shutting down")


if __name__ == "__main__":
    sys.exit(main())
