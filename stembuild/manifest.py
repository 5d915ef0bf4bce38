"""Stemcell manifest generation."""

from __future__ import annotations

import hashlib
import io
from dataclasses import dataclass
from typing import BinaryIO

_MANIFEST_TEMPLATE = """---
name: bosh-vsphere-esxi-windows{os}-go_agent
version: '{version}'
sha1: '{sha1}'
operating_system: windows{os}
cloud_properties:
  infrastructure: vsphere
  hypervisor: esxi
stemcell_formats:
- vsphere-ovf
- vsphere-ova
"""

_CHUNK_SIZE = 64 * 1024


class ManifestError(RuntimeError):
    """Raised when a manifest cannot be generated."""


@dataclass(frozen=True)
class ManifestGenerator:
    """Produces a stemcell manifest for an operating system and version."""

    os: str
    version: str

    def manifest(self, image: BinaryIO) -> BinaryIO:
        """Read ``image`` to its end and return a stream holding the manifest."""
        digest = hashlib.sha1()
        try:
            for chunk in iter(lambda: image.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
        except OSError as exc:
            raise ManifestError(f"failed to calculate image shasum: {exc}") from exc

        content = _MANIFEST_TEMPLATE.format(
            os=self.os, version=self.version, sha1=digest.hexdigest()
        )
        return io.BytesIO(content.encode())