"""
Queries the shell for installed packaged applications.

These lookups are informational: they feed the `list-apps` command and the
package summary printed before a launch. None of them is needed to launch or
supervise an application.
"""
import json
import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional

from librarylink.local.config import effective_settings as config

log = logging.getLogger(__name__)

START_APPS_COMMAND = "Get-StartApps | ForEach-Object { \"$($_.Name)`t$($_.AppID)\" }"

PACKAGE_DETAILS_TEMPLATE = (
    "$app = Get-StartApps | Where-Object {{ $_.AppID -eq '{aumid}' }} | Select-Object -First 1; "
    "$pkg = Get-AppxPackage | Where-Object {{ $_.PackageFamilyName -eq '{family}' }} | Select-Object -First 1; "
    "$pkgDisplay = if ($pkg) {{ (Get-AppxPackageManifest $pkg).Package.Properties.DisplayName }}; "
    "[pscustomobject]@{{ "
    "DisplayName = $app.Name; PackageDisplayName = $pkgDisplay; InstallLocation = $pkg.InstallLocation; "
    "PackageFullName = $pkg.PackageFullName; PackageFamilyName = $pkg.PackageFamilyName "
    "}} | ConvertTo-Json"
)


class CatalogError(Exception):
    """Raised when the shell query for application data fails."""


@dataclass(frozen=True)
class AppEntry:
    name: str
    aumid: str


@dataclass(frozen=True)
class PackageDetails:
    display_name: Optional[str] = None
    package_display_name: Optional[str] = None
    install_path: Optional[str] = None
    full_name: Optional[str] = None
    family_name: Optional[str] = None


def _run_powershell(command: str) -> str:
    """
    Runs a PowerShell command and returns its decoded stdout.

    :param command: The script passed to `-Command`.
    :return str: The standard output of the command.
    :raises CatalogError: If PowerShell cannot be run, times out, or exits non-zero.
    """
    args = [config.POWERSHELL_EXECUTABLE, "-Command", command]
    try:
        result = subprocess.run(args, capture_output=True, timeout=config.APP_QUERY_TIMEOUT, check=False)
    except subprocess.TimeoutExpired as e:
        raise CatalogError(f"PowerShell command timed out after {e.timeout} seconds") from e
    except OSError as e:
        raise CatalogError(f"Failed to execute PowerShell command: {e}") from e

    if result.returncode != 0:
        stderr = (result.stderr or b"").decode("utf-8", errors="replace").strip()
        raise CatalogError(f"PowerShell command failed: {stderr}")
    return (result.stdout or b"").decode("utf-8", errors="replace")


def parse_start_apps(output: str, search_term: Optional[str] = None) -> List[AppEntry]:
    """
    Parses tab-separated `Name<TAB>AppID` lines into sorted AppEntry objects.

    Lines without a tab and entries without an AUMID are skipped. When a search
    term is given only names containing it (case-insensitively) are kept.
    """
    apps = []
    for line in output.splitlines():
        line = line.strip()
        if not line or "\t" not in line:
            continue

        name, aumid = (part.strip() for part in line.split("\t", 1))
        if not aumid:
            continue
        if search_term and search_term.lower() not in name.lower():
            continue
        apps.append(AppEntry(name=name, aumid=aumid))

    apps.sort(key=lambda app: app.name.lower())
    return apps


def list_installed_apps(search_term: Optional[str] = None) -> List[AppEntry]:
    """Returns the installed applications that have an AUMID, sorted by name."""
    return parse_start_apps(_run_powershell(START_APPS_COMMAND), search_term)


def _quote(value: str) -> str:
    return value.replace("'", "''")


def get_package_details(aumid: str) -> PackageDetails:
    """
    Looks up the package that provides an application.

    :param aumid: The Application User Model ID, `<PackageFamilyName>!<AppId>`.
    :return PackageDetails: The fields the shell could resolve; missing ones are None.
    :raises CatalogError: If the query fails or its output is not valid JSON.
    """
    family = aumid.split("!", 1)[0]
    command = PACKAGE_DETAILS_TEMPLATE.format(aumid=_quote(aumid), family=_quote(family))
    output = _run_powershell(command).strip()
    if not output:
        return PackageDetails()

    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Unexpected package query output: {e}") from e
    if not isinstance(data, dict):
        raise CatalogError("Unexpected package query output: expected a JSON object")

    return PackageDetails(
        display_name=data.get("DisplayName") or None,
        package_display_name=data.get("PackageDisplayName") or None,
        install_path=data.get("InstallLocation") or None,
        full_name=data.get("PackageFullName") or None,
        family_name=data.get("PackageFamilyName") or None,
    )
