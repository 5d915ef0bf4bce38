"""Parameters for packaging a stemcell from a VMDK file."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class VmdkPackageParameters:
    """Operating system, output directory, version and VMDK path."""

    os_version: str = ""
    output_dir: str = ""
    version: str = ""
    vmdk_file: str = ""

    def copy_from(self, other: VmdkPackageParameters) -> None:
        """Fill fields that are empty here with the values of ``other``.

        The output directory is never copied.
        """
        if not self.os_version:
            self.os_version = other.os_version
        if not self.version:
            self.version = other.version
        if not self.vmdk_file:
            self.vmdk_file = other.vmdk_file