"""Assemble a stemcell from an image, a manifest and a file name."""

from __future__ import annotations

from typing import BinaryIO, Protocol


class ManifestSource(Protocol):
    """Produces a manifest stream for an image."""

    def manifest(self, image: BinaryIO) -> BinaryIO: ...


class FileNameSource(Protocol):
    """Produces the file name of the stemcell."""

    def filename(self) -> str: ...


class TarSink(Protocol):
    """Writes streams into a compressed tarball."""

    def write(self, filename: str, *args: BinaryIO) -> None: ...


class StemcellGenerationError(RuntimeError):
    """Raised when a stemcell cannot be generated."""


class StemcellGenerator:
    """Builds a stemcell tarball out of an image stream."""

    def __init__(
        self,
        manifest_generator: ManifestSource,
        file_name_generator: FileNameSource,
        tar_writer: TarSink,
    ) -> None:
        self.manifest_generator = manifest_generator
        self.file_name_generator = file_name_generator
        self.tar_writer = tar_writer

    def generate(self, image: BinaryIO) -> None:
        """Generate the manifest and write the image and manifest into a tarball."""
        try:
            manifest = self.manifest_generator.manifest(image)
        except Exception as exc:
            raise StemcellGenerationError(
                f"failed to generate stemcell manifest: {exc}"
            ) from exc

        filename = self.file_name_generator.filename()

        try:
            self.tar_writer.write(filename, image, manifest)
        except Exception as exc:
            raise StemcellGenerationError(
                f"failed to generate stemcell tarball: {exc}"
            ) from exc