"""
datoria command-line entry point.

The launcher has no options of its own: every argument is forwarded to the
resolved datoria executable. Set DATORIA_DEBUG (to any value) to see what
the launcher is doing.
"""

import logging
import os
import sys
from typing import List, Optional

from datoria_launcher.config.settings import load_settings
from datoria_launcher.core.context import DEBUG_ENV_VAR, LaunchContext
from datoria_launcher.core.interfaces import ProcessReplacer
from datoria_launcher.launcher.launcher import Launcher

logger = logging.getLogger(__name__)

EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


class CLI:
    """datoria launcher command-line interface."""

    def __init__(
        self,
        context: Optional[LaunchContext] = None,
        replacer: Optional[ProcessReplacer] = None,
    ):
        self.context = context
        self.replacer = replacer

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Resolve datoria and hand control to it.

        Args:
            args: Arguments to forward (uses sys.argv[1:] if None)

        Returns:
            Exit code; only reached on failure, or when the process
            replacer returns (tests)
        """
        if args is None:
            args = sys.argv[1:]

        debug = self._debug_enabled()
        self._configure_logging(debug)

        try:
            context = self.context or LaunchContext.from_environment()
            settings = load_settings(context)
            launcher = Launcher(context, settings, replacer=self.replacer)
            launcher.run(args)
        except KeyboardInterrupt:
            logger.error("Interrupted")
            return EXIT_INTERRUPTED
        except Exception as e:
            logger.error(f"Error: {e}")
            if debug:
                logger.debug("Launcher failure details", exc_info=True)
            return EXIT_FAILURE

        return 0

    def _debug_enabled(self) -> bool:
        environ = self.context.environ if self.context else os.environ
        return DEBUG_ENV_VAR in environ

    def _configure_logging(self, debug: bool):
        """Configure stderr logging from the debug environment variable."""
        if debug:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        else:
            level = logging.WARNING
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )


def main(argv: Optional[List[str]] = None):
    """Main entry point for the datoria launcher."""
    cli = CLI()
    sys.exit(cli.run(argv))


if __name__ == "__main__":
    main()
