[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "stembuild"
version = "0.1.0"
description = "Build blocks for packaging Windows VMDK disks or vCenter VMs into vSphere stemcells"
requires-python = ">=3.10"
dependencies = []
keywords = ["stemcell", "vsphere", "vmdk", "ovftool", "packaging"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Archiving :: Packaging",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["stembuild"]

[tool.pytest.ini_options]
addopts = "-ra"
