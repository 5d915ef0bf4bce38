import io

import pytest

from stembuild.stemcell_generator import StemcellGenerationError, StemcellGenerator


class FakeManifestGenerator:
    def __init__(self, result=None, error=None):
        self.result = result if result is not None else io.BytesIO(b"")
        self.error = error
        self.calls = []

    def manifest(self, image):
        self.calls.append(image)
        if self.error is not None:
            raise self.error
        return self.result


class FakeFileNameGenerator:
    def __init__(self, name=""):
        self.name = name
        self.calls = 0

    def filename(self):
        self.calls += 1
        return self.name


class FakeTarWriter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def write(self, filename, *args):
        self.calls.append((filename, args))
        if self.error is not None:
            raise self.error


@pytest.fixture
def image():
    return io.BytesIO(b"")


def test_generates_a_manifest(image):
    manifest_generator = FakeManifestGenerator()
    generator = StemcellGenerator(manifest_generator, FakeFileNameGenerator(), FakeTarWriter())

    generator.generate(image)

    assert len(manifest_generator.calls) == 1
    assert manifest_generator.calls[0] is image


def test_returns_an_error_when_manifest_generation_fails(image):
    manifest_generator = FakeManifestGenerator(error=RuntimeError("some manifest error"))
    generator = StemcellGenerator(manifest_generator, FakeFileNameGenerator(), FakeTarWriter())

    with pytest.raises(StemcellGenerationError) as excinfo:
        generator.generate(image)

    assert str(excinfo.value) == "failed to generate stemcell manifest: some manifest error"


def test_generates_a_filename(image):
    file_name_generator = FakeFileNameGenerator()
    generator = StemcellGenerator(FakeManifestGenerator(), file_name_generator, FakeTarWriter())

    generator.generate(image)

    assert file_name_generator.calls == 1


def test_generates_a_tarball(image):
    expected_manifest = io.BytesIO(b"manifest")
    tar_writer = FakeTarWriter()
    generator = StemcellGenerator(
        FakeManifestGenerator(result=expected_manifest),
        FakeFileNameGenerator("the-file.tgz"),
        tar_writer,
    )

    generator.generate(image)

    assert len(tar_writer.calls) == 1
    filename, objects = tar_writer.calls[0]
    assert filename == "the-file.tgz"
    assert len(objects) == 2
    assert any(obj is expected_manifest for obj in objects)
    assert any(obj is image for obj in objects)


def test_returns_an_error_when_tar_writer_fails(image):
    generator = StemcellGenerator(
        FakeManifestGenerator(),
        FakeFileNameGenerator(),
        FakeTarWriter(error=RuntimeError("some tar writer error")),
    )

    with pytest.raises(StemcellGenerationError) as excinfo:
        generator.generate(image)

    assert str(excinfo.value) == "failed to generate stemcell tarball: some tar writer error"