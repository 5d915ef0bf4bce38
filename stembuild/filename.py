"""File names of vSphere Windows stemcells."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FilenameGenerator:
    """Produces the stemcell file name for an operating system and version."""

    os: str
    version: str

    def filename(self) -> str:
        """Return the stemcell tarball file name."""
        return f"bosh-stemcell-{self.version}-vsphere-esxi-windows{self.os}-go_agent.tgz"