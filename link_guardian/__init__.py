# link_guardian/__init__.py
"""
link-guardian package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point; the name keeps ``link_guardian.cli`` bound to the module
from link_guardian.cli import cli as main_cli  # noqa: E402

__all__ = ["__version__", "main_cli"]
