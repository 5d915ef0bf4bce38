"""Configuration, tarball and manifest helpers, and packagers for vSphere Windows stemcells."""

__version__ = "0.1.0"