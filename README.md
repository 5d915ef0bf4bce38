# stembuild

A library for building vSphere Windows stemcell tarballs. The tarballs are
named `bosh-stemcell-<version>-vsphere-esxi-windows<os>-go_agent.tgz`. The
library uses only the Python standard library.

## Configuration

```python
from stembuild.source_config import SourceConfig, Source
from stembuild.output_config import OutputConfig

source = SourceConfig(vmdk="/path/to/disk.vmdk")
assert source.get_source() is Source.VMDK

output = OutputConfig(os="2019", stemcell_version="2019.12", output_dir="out")
output.validate_config()
```

`SourceConfig.get_source()` returns `Source.VMDK` or `Source.VCENTER`. It raises
`SourceConfigError` in three cases:

- a VMDK is set together with any vCenter setting;
- only some of `url`, `username`, `password` and `vm_inventory_path` are set;
- nothing is set.

`OutputConfig.validate_config()` checks three things:

- The OS must be one of `2012R2`, `1803`, `2016` or `2019`. See `is_valid_os`.
- The version must be `N.N` or `N.N.N`, optionally followed by `-build.N`, or
  `N.N.N-manual.N`. See `is_valid_stemcell_version`.
- The output directory must be usable. An empty value or `.` means the current
  directory. Any other directory is created if it is missing, through
  `validate_or_create_output_dir`.

It raises if a stemcell file with the resulting name already exists.

`stembuild.package_parameters.VmdkPackageParameters.copy_from()` fills empty
fields from another set of parameters. It never copies `output_dir`.

## Packaging from vCenter

`stembuild.vcenter_packager.VCenterPackager(source_config, output_config, client)`
works through a `client` that you supply. The client must provide the methods
described by the `IaasClient` protocol:

- `validate_url`
- `validate_credentials`
- `find_vm`
- `export_vm`
- `list_devices`
- `remove_device`
- `eject_cd_rom`

`validate_source_parameters()` checks the URL, then the credentials, then that
the VM exists.

`package()` does the following:

1. Removes `floppy-*` and `ethernet-*` devices.
2. Ejects `cdrom-*` devices.
3. Exports the VM into a temporary directory. A failure here raises
   `VCenterPackagerError`.
4. Tars the exported files into an `image` and writes a `stemcell.MF` next to it.
5. Writes the stemcell into `output_config.output_dir`.

## Packaging from a VMDK

`stembuild.vmdk_packager.VmdkPackager` provides the following:

- `validate_source_parameters()` checks that the VMDK is a regular file and that
  `ovftool` can be found.
- `validate_free_space_for_package(fs)` needs twice the VMDK size plus half a
  gigabyte. It asks `fs.get_available_disk_space(path)` how much space there is.
- `convert_vmx_to_ova(vmx, ova)` runs `ovftool`. It kills the process when
  `stop_config()` is called, and raises `Interrupted`.
- `create_stemcell()` tars the files named by `image` and `manifest` into a
  stemcell inside `temp_dir()`.
- `cleanup()` removes that temporary directory.

`stembuild.ovftool` finds the OVF Tool:

- `ovftool(search_paths)` looks on `PATH` first. On macOS and Windows it then
  looks under the given directories.
- `search_paths()` returns the standard install locations. These come from
  VMware Fusion on macOS and from the registry on Windows.
- `find_executable(root, name)` walks a directory tree.
- Each of these raises `ExecutableNotFoundError` when nothing is found.

## Building pieces by hand

```python
from stembuild.packager_utility import (
    create_manifest, stemcell_filename, tar_generator, write_manifest,
)

sha1 = tar_generator("work/image", "exported-vm-dir")  # returns the tarball's SHA-1
write_manifest(create_manifest("2019", "2019.12", sha1), "work")
tar_generator(stemcell_filename("2019.12", "2019"), "work")
```

More pieces are available:

- `stembuild.manifest.ManifestGenerator(os, version).manifest(image)` returns a
  stream holding a manifest with the image's SHA-1.
- `stembuild.filename.FilenameGenerator(os, version).filename()` returns the
  stemcell file name.
- `stembuild.tar_writer.TarWriter().write(filename, *tarables)` writes objects
  into a `.tgz` with mode 0644. Each object must provide `read`, `size()` and
  `name()`.
- `stembuild.stemcell_generator.StemcellGenerator` joins a manifest generator, a
  file name generator and a tar writer. Failures raise `StemcellGenerationError`.
- `stembuild.packager.Packager(source, generator).package()` feeds
  `source.artifact_reader()` to `generator.generate()`. Failures raise
  `PackagerError`.
- `stembuild.poller.Poller().poll(seconds, func)` calls `func` every `seconds`
  until it returns True.

## What this package does not do

- There is no command-line program.
- There is no vCenter client and no disk-space probe. You must supply objects
  for those.
- `VmdkPackager` does not write the VMX file for a disk. It does not convert a
  VMDK into a compressed `image` either, and it has no single method that runs
  the whole VMDK-to-stemcell process. It offers the steps listed above.

## Running the tests

```
pip install .[test]
pytest
```