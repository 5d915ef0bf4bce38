"""Packaging an artifact from a source into a stemcell."""

from __future__ import annotations

from typing import BinaryIO, Protocol


class ArtifactSource(Protocol):
    """Provides the artifact a stemcell is built from."""

    def artifact_reader(self) -> BinaryIO: ...


class Generator(Protocol):
    """Turns an artifact stream into a stemcell."""

    def generate(self, reader: BinaryIO) -> None: ...


class PackagerError(RuntimeError):
    """Raised when packaging fails."""


class Packager:
    """Feeds the artifact of a source to a stemcell generator."""

    def __init__(self, source: ArtifactSource, stemcell_generator: Generator) -> None:
        self.source = source
        self.stemcell_generator = stemcell_generator

    def package(self) -> None:
        """Retrieve the artifact and generate the stemcell from it."""
        try:
            artifact = self.source.artifact_reader()
        except Exception as exc:
            raise PackagerError(f"packager failed to retrieve artifact: {exc}") from exc
        try:
            self.stemcell_generator.generate(artifact)
        except Exception as exc:
            raise PackagerError(f"packager failed to generate stemcell: {exc}") from exc