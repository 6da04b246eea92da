import logging
from typing import List
from librarylink.local.console.handler import (
    handle_find_command, handle_launch_command, handle_list_apps_command, print_help,
)

log = logging.getLogger(__name__)


def execute_command(command: str, args: List[str]) -> None:
    """
    Executes a single command from the user.

    :param command: The main command string (e.g., 'uwp-launch', 'list-apps').
    :param args: A list of arguments for the command.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "uwp-launch": lambda: handle_launch_command(args),
        "list-apps": lambda: handle_list_apps_command(args),
        "find-process": lambda: handle_find_command(args),
        "help": print_help,
    }

    if command in command_map:
        command_map[command]()
    else:
        print(f"Unknown command: {command}")
        print("Use 'uwp-launch', 'list-apps' or 'find-process'")
