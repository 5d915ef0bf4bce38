import os
import sys

import pytest

from stembuild.ovftool import (
    ExecutableNotFoundError,
    find_executable,
    home_directory,
    ovftool,
    search_paths,
    vmware_install_paths,
)

OVFTOOL_EXE = "ovftool.exe" if sys.platform == "win32" else "ovftool"


def _make_executable(path):
    path.write_bytes(b"")
    os.chmod(path, 0o700)


@pytest.fixture
def exe_folder(tmp_path):
    folder = tmp_path / "dummyExecutables"
    (folder / "out").mkdir(parents=True)
    return folder


@pytest.fixture
def empty_path(tmp_path, monkeypatch):
    empty = tmp_path / "emptybin"
    empty.mkdir()
    monkeypatch.setenv("PATH", str(empty))
    return empty


def test_find_executable_returns_location(exe_folder):
    target = exe_folder / "out" / OVFTOOL_EXE
    _make_executable(target)
    assert find_executable(str(exe_folder), OVFTOOL_EXE) == os.path.join(
        str(exe_folder), "out", OVFTOOL_EXE
    )


def test_find_executable_missing_executable(exe_folder):
    with pytest.raises(ExecutableNotFoundError) as info:
        find_executable(str(exe_folder), OVFTOOL_EXE)
    assert "executable file not found in: " + str(exe_folder) in str(info.value)


def test_find_executable_invalid_name(exe_folder):
    _make_executable(exe_folder / "out" / OVFTOOL_EXE)
    with pytest.raises(ExecutableNotFoundError) as info:
        find_executable(str(exe_folder), "notRealExec")
    assert "executable file not found in: " + str(exe_folder) in str(info.value)


def test_find_executable_invalid_root(tmp_path):
    with pytest.raises(ExecutableNotFoundError) as info:
        find_executable(str(tmp_path / "dirShouldNotExist"), OVFTOOL_EXE)
    assert info.value.name == OVFTOOL_EXE


def test_ovftool_found_on_path(tmp_path, monkeypatch):
    bin_dir = tmp_path / "ovftmp"
    bin_dir.mkdir()
    _make_executable(bin_dir / OVFTOOL_EXE)
    monkeypatch.setenv("PATH", str(bin_dir))
    assert ovftool([]) == os.path.join(str(bin_dir), OVFTOOL_EXE)


def test_ovftool_fails_when_not_on_path(empty_path):
    with pytest.raises(ExecutableNotFoundError):
        ovftool([])


def test_portable_ignores_search_paths(tmp_path, empty_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    install = tmp_path / "install"
    install.mkdir()
    _make_executable(install / "ovftool")
    with pytest.raises(ExecutableNotFoundError):
        ovftool([str(install)])


def test_portable_search_paths_are_empty(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    assert search_paths() == []


def test_darwin_fails_with_invalid_install_paths(tmp_path, empty_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    install = tmp_path / "ovftmp"
    install.mkdir()
    with pytest.raises(ExecutableNotFoundError):
        ovftool([str(install)])


def test_darwin_fails_with_empty_install_paths(empty_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    with pytest.raises(ExecutableNotFoundError):
        ovftool([])


def test_darwin_returns_ovftool_from_install_paths(tmp_path, empty_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    install = tmp_path / "ovftmp"
    dummy = tmp_path / "trashdir"
    install.mkdir()
    dummy.mkdir()
    _make_executable(install / "ovftool")
    found = ovftool(["notrealdir", str(dummy), str(install)])
    assert found == os.path.join(str(install), "ovftool")


def test_darwin_search_paths_include_home(tmp_path, monkeypatch):
    monkeypatch.setattr(sys, "platform", "darwin")
    monkeypatch.setenv("HOME", str(tmp_path))
    assert search_paths() == [
        "/Applications/VMware Fusion.app",
        os.path.join(str(tmp_path), "Applications", "VMware Fusion.app"),
    ]


def test_home_directory_uses_home_variable(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert home_directory() == str(tmp_path)


def test_home_directory_without_home_variable(monkeypatch):
    import pwd

    monkeypatch.delenv("HOME", raising=False)
    assert home_directory() == pwd.getpwuid(os.getuid()).pw_dir


def test_vmware_install_paths_fails_for_invalid_key():
    with pytest.raises(OSError):
        vmware_install_paths([r"\SOFTWARE\faketempkey"])


def test_vmware_install_paths_fails_for_empty_keys():
    with pytest.raises(OSError):
        vmware_install_paths([])


def test_error_message_names_executable():
    error = ExecutableNotFoundError("ovftool", "executable file not found in $PATH")
    assert str(error) == 'exec: "ovftool": executable file not found in $PATH'