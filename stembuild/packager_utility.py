"""Helpers for writing stemcell manifests and tarballs."""

from __future__ import annotations

import gzip
import hashlib
import os
import stat
import tarfile

_MANIFEST_FORMAT = """---
name: bosh-vsphere-esxi-windows{os}-go_agent
version: '{version}'
api_version: 3
sha1: {sha1}
operating_system: windows{os}
cloud_properties:
  infrastructure: vsphere
  hypervisor: esxi
stemcell_formats:
- vsphere-ovf
- vsphere-ova
"""


class _HashingWriter:
    """Writes to a file while hashing everything written."""

    def __init__(self, target) -> None:
        self._target = target
        self.digest = hashlib.sha1()

    def write(self, data) -> int:
        self.digest.update(data)
        self._target.write(data)
        return len(data)

    def flush(self) -> None:
        self._target.flush()


def write_manifest(manifest_contents: str, manifest_path: str) -> None:
    """Create ``stemcell.MF`` in directory ``manifest_path``; it must not exist yet."""
    path = os.path.join(manifest_path, "stemcell.MF")
    try:
        fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_WRONLY, 0o644)
    except OSError as exc:
        raise OSError(f"creating stemcell.MF ({path}): {exc}") from exc
    with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
        try:
            handle.write(manifest_contents)
        except OSError as exc:
            handle.close()
            os.remove(path)
            raise OSError(f"writing stemcell.MF ({path}): {exc}") from exc


def create_manifest(os_version: str, version: str, sha1sum: str) -> str:
    """Return the stemcell manifest text."""
    return _MANIFEST_FORMAT.format(os=os_version, version=version, sha1=sha1sum)


def tar_generator(destination_file_name: str, source_dir_name: str) -> str:
    """Tar and gzip the regular files of a directory; return the archive's SHA-1."""
    try:
        entries = list(os.scandir(source_dir_name))
    except OSError as exc:
        raise OSError(f"unable to open {source_dir_name}") from exc

    try:
        destination = open(destination_file_name, "wb")
    except OSError as exc:
        raise OSError(
            f"unable to create destination file with name {destination_file_name}"
        ) from exc

    with destination:
        hashing = _HashingWriter(destination)
        gz = gzip.GzipFile(filename="", mode="wb", fileobj=hashing, mtime=0)
        archive = tarfile.open(fileobj=gz, mode="w")

        for entry in entries:
            if entry.is_dir():
                continue
            try:
                info_stat = entry.stat()
                source = open(entry.path, "rb")
            except OSError as exc:
                raise OSError(f"unable to open files in {source_dir_name}") from exc
            with source:
                info = tarfile.TarInfo(entry.name)
                info.size = info_stat.st_size
                info.mode = stat.S_IMODE(info_stat.st_mode)
                info.mtime = int(info_stat.st_mtime)
                try:
                    archive.addfile(info, source)
                except (OSError, tarfile.TarError) as exc:
                    raise OSError(
                        "unable to write contents to destination tar file"
                    ) from exc

        # The archive must be closed before hashing: closing writes the footer.
        try:
            archive.close()
        except OSError as exc:
            raise OSError("unable to close tar file") from exc
        try:
            gz.close()
        except OSError as exc:
            raise OSError("unable to close tar file (gzip)") from exc

    return hashing.digest.hexdigest()


def stemcell_filename(version: str, os_name: str) -> str:
    """Return the stemcell tarball file name."""
    return f"bosh-stemcell-{version}-vsphere-esxi-windows{os_name}-go_agent.tgz"