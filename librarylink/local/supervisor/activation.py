"""
COM binding for the shell's ApplicationActivationManager.

Windows only. The module is imported by the launcher on demand, so importing
the rest of the package never requires comtypes.
"""
import logging
import contextlib
from ctypes import POINTER, c_int, c_void_p
from ctypes.wintypes import DWORD, LPCWSTR

import comtypes
from comtypes import COMMETHOD, GUID, HRESULT, IUnknown

from librarylink.local.supervisor.models import LaunchError

log = logging.getLogger(__name__)

CLSID_ApplicationActivationManager = GUID("{45BA127D-10A8-46EA-8AB7-56EA9078943C}")
AO_NONE = 0


class IApplicationActivationManager(IUnknown):
    _iid_ = GUID("{2E941141-7F97-4756-BA1D-9DECDE894A3D}")
    _methods_ = [
        COMMETHOD([], HRESULT, "ActivateApplication",
                  (["in"], LPCWSTR, "appUserModelId"),
                  (["in"], LPCWSTR, "arguments"),
                  (["in"], c_int, "options"),
                  (["out"], POINTER(DWORD), "processId")),
        COMMETHOD([], HRESULT, "ActivateForFile",
                  (["in"], LPCWSTR, "appUserModelId"),
                  (["in"], c_void_p, "itemArray"),
                  (["in"], LPCWSTR, "verb"),
                  (["out"], POINTER(DWORD), "processId")),
        COMMETHOD([], HRESULT, "ActivateForProtocol",
                  (["in"], LPCWSTR, "appUserModelId"),
                  (["in"], c_void_p, "itemArray"),
                  (["out"], POINTER(DWORD), "processId")),
    ]


@contextlib.contextmanager
def com_apartment():
    """Initializes a single-threaded COM apartment for the duration of the block."""
    try:
        comtypes.CoInitializeEx(comtypes.COINIT_APARTMENTTHREADED)
    except OSError as e:
        raise LaunchError(f"Failed to initialize COM: {e}") from e
    try:
        yield
    finally:
        comtypes.CoUninitialize()
        log.debug("COM apartment released.")


def activate_application(app_id: str) -> int:
    """
    Activates a packaged application and returns the pid of the started process.

    No activation arguments and no activation options are passed.

    :param app_id: The Application User Model ID to activate.
    :return: The pid reported by the activation manager.
    :raises LaunchError: If the manager cannot be created or the activation is rejected.
    """
    with com_apartment():
        try:
            manager = comtypes.CoCreateInstance(
                CLSID_ApplicationActivationManager,
                interface=IApplicationActivationManager,
                clsctx=comtypes.CLSCTX_INPROC_SERVER,
            )
        except (comtypes.COMError, OSError) as e:
            raise LaunchError(f"Failed to create ApplicationActivationManager: {e}") from e

        try:
            return int(manager.ActivateApplication(app_id, None, AO_NONE))
        except (comtypes.COMError, OSError) as e:
            raise LaunchError(f"Failed to activate application: {e}") from e
        finally:
            # Drop the interface pointer before the apartment is torn down.
            del manager
