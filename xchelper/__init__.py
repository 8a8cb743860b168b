"""
xchelper package

This package implements xchelper, a CLI that keeps an Xcode workflow in step
with Swift package updates, Docker (Linux) builds, archives, S3 uploads and
git version tags.

Key responsibilities are split across modules:
- `options.py`: declarative command/option registry
- `arguments.py`: argv + environment + config -> ArgumentIndex
- `commands.py`: one handler per command
- `build_log.py`: "did the last Xcode build succeed?"
- `versioning.py`: semantic version tags
- `helper.py`: every external tool and SDK call
- `cli.py`: CLI entrypoint and dispatch
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.1.0"
