"""Validation of where and how a stemcell is written."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass

_VALID_OS = frozenset({"2012R2", "1803", "2016", "2019"})

_VERSION_PATTERNS = tuple(
    re.compile(pattern, re.ASCII)
    for pattern in (
        r"\d+\.\d+",
        r"\d+\.\d+-build\.\d+",
        r"\d+\.\d+\.\d+",
        r"\d+\.\d+\.\d+-build\.\d+",
        r"\d+\.\d+\.\d+-manual\.\d+",
    )
)


@dataclass
class OutputConfig:
    """Operating system, version and destination of a stemcell."""

    os: str = ""
    stemcell_version: str = ""
    output_dir: str = ""

    def validate_config(self) -> None:
        """Check the settings and make sure the stemcell file does not exist yet."""
        if not is_valid_os(self.os):
            raise ValueError(f"versioning error; parsed os version is: {self.os}")
        if not is_valid_stemcell_version(self.stemcell_version):
            raise ValueError(
                f"versioning error; parsed stemcell version is: {self.stemcell_version}. "
                "Expected format [NUMBER].[NUMBER] or [NUMBER].[NUMBER].[NUMBER]"
            )

        output_dir = self.output_dir
        if output_dir in ("", "."):
            try:
                output_dir = os.getcwd()
            except OSError as exc:
                raise OSError(f"error getting working directory {exc}") from exc
        else:
            validate_or_create_output_dir(output_dir)

        name = os.path.join(output_dir, _stemcell_filename(self.stemcell_version, self.os))
        try:
            os.stat(name)
        except FileNotFoundError:
            return
        except OSError as exc:
            raise OSError(
                f"error with output file ({name}): {exc} (file may already exist)"
            ) from exc
        raise FileExistsError(f"error with output file ({name}): file may already exist")


def is_valid_os(os_name: str) -> bool:
    """Return True for a supported Windows version."""
    return os_name in _VALID_OS


def validate_or_create_output_dir(output_dir: str) -> None:
    """Create ``output_dir`` if missing; fail if it exists but is not a directory."""
    try:
        info = os.stat(output_dir)
    except FileNotFoundError:
        os.mkdir(output_dir, 0o700)
        return
    except OSError as exc:
        raise OSError(f"error opening output directory ({output_dir}): {exc}") from exc
    if not os.path.isdir(output_dir) or info is None:
        raise NotADirectoryError(f"output argument ({output_dir}): is not a directory")


def is_valid_stemcell_version(version: str) -> bool:
    """Return True when ``version`` has one of the accepted stemcell version forms."""
    if not version:
        return False
    return any(pattern.fullmatch(version) for pattern in _VERSION_PATTERNS)


def _stemcell_filename(version: str, os_name: str) -> str:
    return f"bosh-stemcell-{version}-vsphere-esxi-windows{os_name}-go_agent.tgz"