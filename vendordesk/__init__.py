"""Vendor Desk application shell."""

from importlib.metadata import PackageNotFoundError, version

__all__ = ["get_version"]


def get_version() -> str:
    """Return the package version if installed, otherwise ``"0.3.0"``."""
    try:
        return version("vendordesk")
    except PackageNotFoundError:
        return "0.3.0"
