import sys
import logging
from typing import List, Optional

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

import librarylink.local.console as console
from librarylink.log import setup_logging
from librarylink.local.config import effective_settings as config


def main(argv: Optional[List[str]] = None) -> int:
    """
    The main entry point for the command-line application.

    :param argv: Command-line arguments without the program name, defaults to `sys.argv[1:]`.
    :return int: The process exit code, always 0.
    """
    args = list(sys.argv[1:] if argv is None else argv)

    verbose = config.VERBOSE_LOGGING
    if "--verbose" in args:
        verbose = True
        args.remove("--verbose")
    setup_logging(logging.DEBUG if verbose else logging.INFO)

    if not args:
        console.print_help()
        return 0

    command, command_args = args[0].lower(), args[1:]
    try:
        console.execute_command(command, command_args)
    except KeyboardInterrupt:
        log.warning("Interrupted by user.")
    # Ending a supervision session is not an application error.
    return 0


def run() -> None:
    """Console-script wrapper around `main`."""
    sys.exit(main())


if __name__ == "__main__":
    run()
