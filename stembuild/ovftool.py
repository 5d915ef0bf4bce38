"""Locating the VMware OVF Tool executable."""

from __future__ import annotations

import os
import shutil
import stat
import sys
from collections.abc import Iterator, Sequence

try:
    import winreg
except ImportError:
    winreg = None

KEYPATHS = (
    r"SOFTWARE\Wow6432Node\VMware, Inc.\VMware Workstation",
    r"SOFTWARE\Wow6432Node\VMware, Inc.\VMware OVF Tool",
    r"SOFTWARE\VMware, Inc.\VMware Workstation",
    r"SOFTWARE\VMware, Inc.\VMware OVF Tool",
)

_FUSION_APP = "/Applications/VMware Fusion.app"


class ExecutableNotFoundError(LookupError):
    """Raised when an executable cannot be located."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(name, reason)
        self.name = name
        self.reason = reason

    def __str__(self) -> str:
        return f'exec: "{self.name}": {self.reason}'


def _walk(path: str) -> Iterator[tuple[str, os.stat_result]]:
    """Yield every path under ``path`` in lexical, depth-first order."""
    info = os.lstat(path)
    yield path, info
    if stat.S_ISDIR(info.st_mode):
        for entry in sorted(os.listdir(path)):
            yield from _walk(os.path.join(path, entry))


def find_executable(root: str, name: str) -> str:
    """Return the first executable file called ``name`` under ``root``."""
    try:
        for path, info in _walk(root):
            if stat.S_ISDIR(info.st_mode) or os.path.basename(path) != name:
                continue
            found = shutil.which(path)
            if found:
                return found
    except OSError as exc:
        raise ExecutableNotFoundError(name, str(exc)) from exc
    raise ExecutableNotFoundError(name, f"executable file not found in: {root}")


def home_directory() -> str:
    """Return the current user's home directory, or an empty string."""
    home = os.environ.get("HOME", "")
    if home:
        return home
    expanded = os.path.expanduser("~")
    return "" if expanded == "~" else expanded.strip()


def vmware_install_paths(keypaths: Sequence[str]) -> list[str]:
    """Read VMware Workstation / OVF Tool install paths from the Windows registry."""
    if winreg is None:
        raise OSError(
            "opening VMware Workstation and OVF Tool registry keys: "
            "registry is not available on this platform"
        )

    key = None
    last_error: object = "no registry key paths given"
    for path in keypaths:
        try:
            key = winreg.OpenKey(winreg.HKEY_LOCAL_MACHINE, path, 0, winreg.KEY_QUERY_VALUE)
            break
        except OSError as exc:
            last_error = exc
    if key is None:
        raise OSError(f"opening VMware Workstation and OVF Tool registry keys: {last_error}")

    paths = []
    with key:
        for value_name in ("InstallPath64", "InstallPath"):
            try:
                value, _ = winreg.QueryValueEx(key, value_name)
            except OSError as exc:
                last_error = exc
                continue
            paths.append(value)

    if not paths:
        raise OSError(f"could not find VMware Workstation install path in registry: {last_error}")
    return paths


def search_paths() -> list[str]:
    """Return the directories where the OVF Tool may be installed on this platform."""
    if sys.platform == "darwin":
        dirs = [_FUSION_APP]
        home = home_directory()
        if home:
            dirs.append(os.path.join(home, _FUSION_APP.lstrip("/")))
        return dirs
    if sys.platform == "win32":
        return vmware_install_paths(KEYPATHS)
    return []


def ovftool(search_paths: Sequence[str]) -> str:
    """Return the path of the OVF Tool, from PATH or the given install directories.

    On platforms other than macOS and Windows only PATH is consulted.
    """
    windows = sys.platform == "win32"
    darwin = sys.platform == "darwin"
    name = "ovftool.exe" if windows else "ovftool"

    found = shutil.which(name)
    if found:
        return found

    if windows or darwin:
        for root in search_paths:
            if darwin and not os.path.isdir(root):
                continue
            try:
                return find_executable(root, name)
            except ExecutableNotFoundError:
                continue

    raise ExecutableNotFoundError(name, "executable file not found in $PATH")