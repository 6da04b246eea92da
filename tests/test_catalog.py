import json
import subprocess

import pytest

from librarylink.local import catalog
from librarylink.local.catalog import AppEntry, CatalogError, PackageDetails

START_APPS_OUTPUT = "\r\n".join([
    "Windows Terminal\tMicrosoft.WindowsTerminal_8wekyb3d8bbwe!App",
    "Notepad++\t",
    "",
    "Calculator\tMicrosoft.WindowsCalculator_8wekyb3d8bbwe!App",
    "garbage line without a tab",
    "  Forza Horizon 5 \t Microsoft.624F8B84B80_8wekyb3d8bbwe!ForzaHorizon5 ",
])


def _fake_run(stdout=b"", returncode=0, stderr=b"", record=None):
    def run(args, **kwargs):
        if record is not None:
            record.append(args)
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr=stderr)
    return run


def test_parse_start_apps_skips_entries_without_aumid_and_sorts():
    apps = catalog.parse_start_apps(START_APPS_OUTPUT)

    assert [app.name for app in apps] == ["Calculator", "Forza Horizon 5", "Windows Terminal"]
    assert apps[1] == AppEntry("Forza Horizon 5", "Microsoft.624F8B84B80_8wekyb3d8bbwe!ForzaHorizon5")

def test_parse_start_apps_filters_by_search_term():
    apps = catalog.parse_start_apps(START_APPS_OUTPUT, search_term="FORZA")

    assert [app.name for app in apps] == ["Forza Horizon 5"]

def test_list_installed_apps_runs_start_apps_query(monkeypatch):
    record = []
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(START_APPS_OUTPUT.encode(), record=record))

    apps = catalog.list_installed_apps()

    assert len(apps) == 3
    assert record[0][1:] == ["-Command", catalog.START_APPS_COMMAND]

def test_list_installed_apps_raises_on_shell_failure(monkeypatch):
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(returncode=1, stderr=b"not recognized"))

    with pytest.raises(CatalogError, match="not recognized"):
        catalog.list_installed_apps()

def test_list_installed_apps_raises_when_shell_missing(monkeypatch):
    def run(args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory")

    monkeypatch.setattr(catalog.subprocess, "run", run)

    with pytest.raises(CatalogError, match="Failed to execute"):
        catalog.list_installed_apps()

def test_get_package_details_parses_json(monkeypatch):
    payload = {
        "DisplayName": "Calculator",
        "PackageDisplayName": "Windows Calculator",
        "InstallLocation": "C:\\Program Files\\WindowsApps\\Microsoft.WindowsCalculator_11.2_x64__8wekyb3d8bbwe",
        "PackageFullName": "Microsoft.WindowsCalculator_11.2_x64__8wekyb3d8bbwe",
        "PackageFamilyName": "Microsoft.WindowsCalculator_8wekyb3d8bbwe",
    }
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(json.dumps(payload).encode()))

    details = catalog.get_package_details("Microsoft.WindowsCalculator_8wekyb3d8bbwe!App")

    assert details.display_name == "Calculator"
    assert details.package_display_name == "Windows Calculator"
    assert details.install_path.endswith("8wekyb3d8bbwe")
    assert details.family_name == "Microsoft.WindowsCalculator_8wekyb3d8bbwe"

def test_get_package_details_missing_fields_are_none(monkeypatch):
    payload = {"DisplayName": None, "PackageDisplayName": None, "InstallLocation": "",
               "PackageFullName": None, "PackageFamilyName": None}
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(json.dumps(payload).encode()))

    assert catalog.get_package_details("Nope_123!App") == PackageDetails()

def test_get_package_details_empty_output(monkeypatch):
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(b"\r\n"))

    assert catalog.get_package_details("Nope_123!App") == PackageDetails()

def test_get_package_details_rejects_invalid_output(monkeypatch):
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(b"not json"))

    with pytest.raises(CatalogError):
        catalog.get_package_details("Nope_123!App")

def test_get_package_details_escapes_quotes(monkeypatch):
    record = []
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(b"", record=record))

    catalog.get_package_details("O'Brien_123!App")

    command = record[0][2]
    assert "'O''Brien_123!App'" in command
    assert "'O''Brien_123'" in command

def test_get_package_details_reads_display_name_from_manifest(monkeypatch):
    record = []
    monkeypatch.setattr(catalog.subprocess, "run", _fake_run(b"", record=record))

    catalog.get_package_details("Microsoft.WindowsCalculator_8wekyb3d8bbwe!App")

    command = record[0][2]
    assert "(Get-AppxPackageManifest $pkg).Package.Properties.DisplayName" in command
    assert "PackageDisplayName = $pkgDisplay" in command
    assert "$pkg.Name" not in command
