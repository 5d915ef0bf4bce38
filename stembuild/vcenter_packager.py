"""Packaging a stemcell from a virtual machine held in vCenter."""

from __future__ import annotations

import os
import posixpath
import re
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from stembuild.output_config import OutputConfig
from stembuild.packager_utility import (
    create_manifest,
    stemcell_filename,
    tar_generator,
    write_manifest,
)
from stembuild.source_config import SourceConfig

_REMOVABLE_DEVICES = re.compile(r"^(floppy-|ethernet-)")
_CDROM_DEVICES = re.compile(r"^(cdrom-)")


class IaasClient(Protocol):
    """Operations on a vCenter that the packager relies on."""

    def validate_url(self) -> None: ...

    def validate_credentials(self) -> None: ...

    def find_vm(self, vm_inventory_path: str) -> None: ...

    def export_vm(self, vm_inventory_path: str, destination: str) -> None: ...

    def list_devices(self, vm_inventory_path: str) -> list[str]: ...

    def remove_device(self, vm_inventory_path: str, device_name: str) -> None: ...

    def eject_cd_rom(self, vm_inventory_path: str, device_name: str) -> None: ...


class VCenterPackagerError(RuntimeError):
    """Raised when a vCenter virtual machine cannot be packaged."""


@dataclass
class VCenterPackager:
    """Exports a prepared VM from vCenter and turns it into a stemcell."""

    source_config: SourceConfig
    output_config: OutputConfig
    client: IaasClient

    def package(self) -> None:
        """Strip devices from the VM, export it and write the stemcell tarball."""
        self._execute_on_matching_device(self.client.remove_device, _REMOVABLE_DEVICES)
        self._execute_on_matching_device(self.client.eject_cd_rom, _CDROM_DEVICES)

        vm_path = self.source_config.vm_inventory_path
        with tempfile.TemporaryDirectory(
            prefix="vcenter-packager-working-directory"
        ) as working_dir, tempfile.TemporaryDirectory(
            prefix="vcenter-packager-stemcell-directory"
        ) as stemcell_dir:
            try:
                self.client.export_vm(vm_path, working_dir)
            except Exception as exc:
                raise VCenterPackagerError("failed to export the prepared VM") from exc

            print("Converting VMDK into stemcell")
            vm_name = posixpath.basename(vm_path)
            sha1sum = tar_generator(
                os.path.join(stemcell_dir, "image"), os.path.join(working_dir, vm_name)
            )
            manifest = create_manifest(
                self.output_config.os, self.output_config.stemcell_version, sha1sum
            )
            try:
                write_manifest(manifest, stemcell_dir)
            except OSError as exc:
                raise VCenterPackagerError("failed to create stemcell.MF file") from exc

            filename = stemcell_filename(
                self.output_config.stemcell_version, self.output_config.os
            )
            tar_generator(os.path.join(self.output_config.output_dir, filename), stemcell_dir)

        print(f"Stemcell successfully created: {filename}")

    def _execute_on_matching_device(
        self, action: Callable[[str, str], None], pattern: re.Pattern[str]
    ) -> None:
        vm_path = self.source_config.vm_inventory_path
        for device in self.client.list_devices(vm_path):
            if pattern.match(device):
                action(vm_path, device)

    def validate_free_space_for_package(self, fs: object) -> None:
        """Nothing to check: the export happens on the vCenter side."""
        return None

    def validate_source_parameters(self) -> None:
        """Check the vCenter URL, the credentials and that the VM exists."""
        self.client.validate_url()
        self.client.validate_credentials()
        self.client.find_vm(self.source_config.vm_inventory_path)