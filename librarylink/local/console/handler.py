import logging
from typing import List, Optional
from librarylink.local.config import effective_settings as config
from librarylink.local.catalog import AppEntry, CatalogError, get_package_details, list_installed_apps
from librarylink.local.supervisor import find_successor, get_process_info, supervise
from librarylink.local.supervisor.models import SupervisionOutcome

log = logging.getLogger(__name__)

MIN_NAME_WIDTH = 12


def print_apps_table(apps: List[AppEntry]) -> None:
    """Prints applications as a two-column name / AUMID table."""
    if not apps:
        print("No applications found.")
        return

    print("=== UWP Applications ===")
    print(f"Found {len(apps)} applications:\n")

    width = max(MIN_NAME_WIDTH, max(len(app.name) for app in apps))
    print(f"{'Application Name':<{width}} AUMID")
    print(f"{'-' * width} {'-' * 50}")
    for app in apps:
        print(f"{app.name:<{width}} {app.aumid}")

def handle_list_apps_command(args: List[str]) -> None:
    """
    Handles the 'list-apps' command.

    :param args: Arguments following the command, only `--search <term>` is accepted.
    """
    search_term: Optional[str] = None
    i = 0
    while i < len(args):
        if args[i] == "--search":
            if i + 1 >= len(args):
                print("Error: --search requires a search term")
                print("Usage: librarylink list-apps --search <term>")
                return
            search_term = args[i + 1]
            i += 2
        else:
            print(f"Error: Unknown option '{args[i]}'")
            print("Usage: librarylink list-apps [--search <term>]")
            return

    try:
        apps = list_installed_apps(search_term)
    except CatalogError as e:
        print(f"Error finding applications: {e}")
        return
    print_apps_table(apps)

def display_package_details(aumid: str) -> None:
    """Prints what the shell knows about the package behind an AUMID."""
    try:
        details = get_package_details(aumid)
    except CatalogError as e:
        log.warning(f"Could not look up package information for '{aumid}': {e}")
        return

    if details.install_path is None and details.display_name is None:
        print("Could not find package information for this AUMID.")
        print("The AUMID might be incorrect, or the app is not installed for the current user.")
        print()
        return

    print("Successfully found app information!")
    fields = (
        ("App Display Name", details.display_name),
        ("Package Display Name", details.package_display_name),
        ("Installed Path", details.install_path),
        ("Package Full Name", details.full_name),
        ("Package Family Name", details.family_name),
    )
    for label, value in fields:
        if value:
            print(f"{label}: {value}")
    print()

def handle_launch_command(args: List[str]) -> None:
    """Handles the 'uwp-launch' command: launch the app and supervise it."""
    if not args:
        print("Error: UWP launch requires an Application User Model ID. Try using librarylink list-apps to find it.")
        print("Usage: librarylink uwp-launch <AUMID>")
        return

    aumid = args[0]
    print("=== UWP App Launch ===")
    print(f"Looking up and launching app with AUMID: {aumid}")
    print()

    if config.SHOW_PACKAGE_DETAILS:
        display_package_details(aumid)

    print("=== Launching Application ===")
    outcome = supervise(aumid)
    log.debug(f"Supervision session for '{aumid}' ended: {outcome.value}")
    if outcome is SupervisionOutcome.LAUNCH_FAILED:
        print("Possible reasons:")
        print("  - The AUMID is incorrect")
        print("  - The app is not installed for the current user")
        print("  - The app is not a UWP application")
        print("  - Access permissions issue")

def handle_find_command(args: List[str]) -> None:
    """Handles the 'find-process' command: report the first process running from a directory."""
    if not args:
        print("Usage: librarylink find-process <directory>")
        return

    directory = " ".join(args)
    pid = find_successor(directory)
    if pid is None:
        print(f"No process found in directory: {directory}")
        return

    info = get_process_info(pid)
    print(f"Found process: {pid}")
    if info is not None:
        print(f"   Process Name: {info.name}")
        print(f"   Process Path: {info.path}")

def print_help() -> None:
    """Prints the main usage text."""
    print("Usage: librarylink <command> [arguments] [--verbose]")
    print("Commands:")
    print("  uwp-launch <AUMID>          - Look up UWP app info, launch it and monitor its process")
    print("  list-apps [options]         - List installed UWP apps and their AUMIDs")
    print("  find-process <directory>    - Show the first running process whose executable is in a directory")
    print()
    print("List Apps Options:")
    print("  --search <term>             - Search for apps containing the term")
    print()
    print("Examples:")
    print("  librarylink uwp-launch Microsoft.WindowsCalculator_8wekyb3d8bbwe!App")
    print("  librarylink list-apps")
    print("  librarylink list-apps --search forza")
