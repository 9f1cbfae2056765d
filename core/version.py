from importlib import metadata

from vacompare import __version__ as _package_version

try:
    __version__ = metadata.version("vacompare")
except metadata.PackageNotFoundError:  # pragma: no cover - during local dev
    __version__ = _package_version
