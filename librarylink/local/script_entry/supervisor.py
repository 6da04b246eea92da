"""
This is a minimal entry point script for a dedicated supervisor process.

Its sole responsibility is to name the process, set up logging, show the
package summary when enabled, and run one launch-and-supervise session for
the AUMID given on the command line.
"""
import sys
import setproctitle
from librarylink.log import setup_logging
from librarylink.local.config import effective_settings as config
from librarylink.local.console.handler import display_package_details
from librarylink.local.supervisor import supervise


def main() -> None:
    setproctitle.setproctitle(config.SUPERVISOR_PROCESS_TITLE)
    setup_logging()

    if len(sys.argv) < 2:
        print("Usage: python -m librarylink.local.script_entry.supervisor <AUMID>")
        return

    aumid = sys.argv[1]
    if config.SHOW_PACKAGE_DETAILS:
        display_package_details(aumid)
    supervise(aumid)


if __name__ == "__main__":
    main()
    sys.exit(0)
