"""Packaging a stemcell from a local VMDK file."""

from __future__ import annotations

import gzip
import os
import shutil
import stat
import subprocess
import tarfile
import tempfile
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import BinaryIO, Protocol

from stembuild import ovftool
from stembuild.package_parameters import VmdkPackageParameters
from stembuild.packager_utility import stemcell_filename

GIGABYTE = 1024 * 1024 * 1024

_POLL_INTERVAL = 0.1


class FileSystem(Protocol):
    """Reports free disk space."""

    def get_available_disk_space(self, path: str) -> int: ...


class Interrupted(Exception):
    """Raised when packaging has been stopped."""

    def __init__(self, message: str = "interrupt") -> None:
        super().__init__(message)


class CancelReader:
    """A reader that fails once its stop event is set."""

    def __init__(self, stream: BinaryIO, stop: threading.Event) -> None:
        self._stream = stream
        self._stop = stop

    def read(self, size: int = -1) -> bytes:
        if self._stop.is_set():
            raise Interrupted()
        return self._stream.read(size)


class CancelWriter:
    """A writer that fails once its stop event is set."""

    def __init__(self, stream: BinaryIO, stop: threading.Event) -> None:
        self._stream = stream
        self._stop = stop

    def write(self, data: bytes) -> int:
        if self._stop.is_set():
            raise Interrupted()
        return self._stream.write(data)

    def flush(self) -> None:
        self._stream.flush()


def _ignore(message: str, *args: object) -> None:
    return None


@dataclass
class VmdkPackager:
    """Builds a stemcell out of a VMDK with the OVF Tool."""

    image: str = ""
    stemcell: str = ""
    manifest: str = ""
    sha1sum: str = ""
    stop: threading.Event = field(default_factory=threading.Event)
    debugf: Callable[..., None] = _ignore
    build_options: VmdkPackageParameters = field(default_factory=VmdkPackageParameters)
    _tmpdir: str = field(default="", init=False, repr=False)

    def writer(self, stream: BinaryIO) -> CancelWriter:
        """Wrap ``stream`` so writes fail once the packager is stopped."""
        return CancelWriter(stream, self.stop)

    def reader(self, stream: BinaryIO) -> CancelReader:
        """Wrap ``stream`` so reads fail once the packager is stopped."""
        return CancelReader(stream, self.stop)

    def stop_config(self) -> None:
        """Stop all work in progress and remove the temporary directory."""
        self.debugf("stopping config")
        try:
            self.stop.set()
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        """Remove the temporary directory if it still exists."""
        if not self._tmpdir:
            return
        if os.path.exists(self._tmpdir):
            self.debugf("deleting temp directory: %s", self._tmpdir)
            shutil.rmtree(self._tmpdir, ignore_errors=True)

    def add_tar_file(self, tar: tarfile.TarFile, name: str) -> None:
        """Add the file ``name`` to ``tar`` under its base name."""
        self.debugf("adding file (%s) to tar archive", name)
        with open(name, "rb") as handle:
            info = tar.gettarinfo(arcname=os.path.basename(name), fileobj=handle)
            tar.addfile(info, self.reader(handle))

    def temp_dir(self) -> str:
        """Return the packager's temporary directory, creating it on first use."""
        if self._tmpdir:
            if not os.path.exists(self._tmpdir):
                self.debugf("unable to stat temp dir (%s) was it deleted?", self._tmpdir)
                raise OSError(f"opening temp directory: {self._tmpdir}")
            return self._tmpdir
        try:
            name = tempfile.mkdtemp(prefix="stemcell-", dir=self.build_options.output_dir or None)
        except OSError as exc:
            raise OSError(f"creating temp directory: {exc}") from exc
        self._tmpdir = name
        self.debugf("created temp directory: %s", name)
        return name

    def create_stemcell(self) -> None:
        """Write the image and manifest into a stemcell tarball in the temp directory."""
        self.debugf("creating stemcell")
        if not self.manifest:
            raise ValueError("create_stemcell: empty manifest")
        if not self.image:
            raise ValueError("create_stemcell: empty image")

        tmpdir = self.temp_dir()
        self.stemcell = os.path.join(
            tmpdir,
            stemcell_filename(self.build_options.version, self.build_options.os_version),
        )
        fd = os.open(self.stemcell, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
        self.debugf("created temp stemcell: %s", self.stemcell)

        started = time.monotonic()
        failure: BaseException | None = None
        with os.fdopen(fd, "wb") as handle:
            try:
                with gzip.GzipFile(
                    filename="", mode="wb", fileobj=self.writer(handle)
                ) as compressed, tarfile.open(fileobj=compressed, mode="w") as tar:
                    self.debugf("adding image file to stemcell tarball: %s", self.image)
                    self.add_tar_file(tar, self.image)
                    self.debugf("adding manifest file to stemcell tarball: %s", self.manifest)
                    self.add_tar_file(tar, self.manifest)
            except (OSError, tarfile.TarError, Interrupted) as exc:
                failure = exc

        if failure is not None:
            os.remove(self.stemcell)
            raise OSError(f"creating stemcell: {failure}") from failure

        self.debugf("created stemcell in: %.3fs", time.monotonic() - started)

    def convert_vmx_to_ova(self, vmx: str, ova: str) -> None:
        """Run the OVF Tool to convert ``vmx`` into ``ova``; abort when stopped."""
        ovfpath = ovftool.ovftool(ovftool.search_paths())
        try:
            process = subprocess.Popen(
                [ovfpath, vmx, ova],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            raise OSError(f"ovftool: {exc}") from exc
        self.debugf("converting vmx to ova with cmd: %s %s", ovfpath, [vmx, ova])

        while True:
            if self.stop.is_set():
                self.debugf("received stop signal killing ovftool process")
                process.kill()
                process.wait()
                raise Interrupted()
            try:
                _, stderr = process.communicate(timeout=_POLL_INTERVAL)
                break
            except subprocess.TimeoutExpired:
                continue

        if process.returncode != 0:
            raise OSError(
                f"converting vmx to ova: exit status {process.returncode}\n"
                f"-- BEGIN STDERR OUTPUT -- :\n{stderr.decode(errors='replace')}\n"
                "-- END STDERR OUTPUT --\n"
            )

    def validate_source_parameters(self) -> None:
        """Check that the VMDK is a regular file and that the OVF Tool is available."""
        if not is_valid_vmdk(self.build_options.vmdk_file):
            raise ValueError("invalid VMDK file")
        try:
            paths = ovftool.search_paths()
        except OSError as exc:
            raise OSError(f"could not get search paths for Ovftool: {exc}") from exc
        try:
            ovftool.ovftool(paths)
        except (LookupError, OSError) as exc:
            raise OSError(f"could not locate Ovftool on PATH: {exc}") from exc

    def validate_free_space_for_package(self, fs: FileSystem) -> None:
        """Check there is room for the OVA and stemcell next to the VMDK."""
        vmdk = self.build_options.vmdk_file
        try:
            vmdk_size = os.stat(vmdk).st_size
        except OSError as exc:
            raise OSError(f"could not get vmdk info: {exc}") from exc

        # The OVA and the stemcell are each at most the size of the VMDK.
        min_space = vmdk_size * 2 + GIGABYTE // 2
        try:
            free_space = fs.get_available_disk_space(os.path.dirname(vmdk) or ".")
        except Exception as exc:
            raise OSError(f"could not check free space on disk: {exc}") from exc

        if free_space < min_space:
            required = min_space - free_space
            raise OSError(
                "Not enough space to create stemcell. "
                f"Free up {required // (1024 * 1024)} MB and try again"
            )


def is_valid_vmdk(vmdk: str) -> bool:
    """Return True if ``vmdk`` is a regular file; raise if it cannot be examined."""
    return stat.S_ISREG(os.stat(vmdk).st_mode)