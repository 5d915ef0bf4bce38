"""Selection of the source a stemcell is built from."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class Source(Enum):
    """Kind of source a stemcell is packaged from."""

    VMDK = auto()
    VCENTER = auto()
    NIL = auto()


class SourceConfigError(ValueError):
    """Raised when the source configuration is missing or contradictory."""


@dataclass
class SourceConfig:
    """Settings for a VMDK file or a vCenter virtual machine."""

    vmdk: str = ""
    url: str = ""
    username: str = ""
    password: str = ""
    vm_inventory_path: str = ""
    ca_cert_file: str = ""

    def get_source(self) -> Source:
        """Return which source is configured, raising if that is unclear."""
        if self._vmdk_provided() and self._partial_vcenter_provided():
            raise SourceConfigError("configuration provided for VMDK & vCenter sources")
        if self._vmdk_provided():
            return Source.VMDK
        if self._vcenter_provided():
            return Source.VCENTER
        if self._partial_vcenter_provided():
            raise SourceConfigError("missing vCenter configurations")
        raise SourceConfigError("no configuration was provided")

    def _vcenter_fields(self) -> tuple[str, ...]:
        return (self.vm_inventory_path, self.username, self.password, self.url)

    def _vmdk_provided(self) -> bool:
        return self.vmdk != ""

    def _vcenter_provided(self) -> bool:
        return all(self._vcenter_fields())

    def _partial_vcenter_provided(self) -> bool:
        return any(self._vcenter_fields())