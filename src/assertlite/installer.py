"""Copy the assertions into a consumer project.

The generated package needs no dependency on assertlite:

    <dest>/assertlite/__init__.py   the assertions module
    <dest>/assertlite/plugin.py     the pytest plugin, importing the above
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from importlib.resources import files
from pathlib import Path

from assertlite.manifest import load_manifest

logger = logging.getLogger(__name__)

PACKAGE_NAME = "assertlite"

HEADER = """\
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

# Code generated by assertlite installer. DO NOT EDIT.

"""

_MAIN_MODULE = "assertlite.assertions"


@dataclass(frozen=True)
class InstallResult:
    project: str
    import_path: str
    written: list[Path]


def main_source() -> str:
    return files(PACKAGE_NAME).joinpath("assertions.py").read_text(encoding="utf-8")


def support_source() -> str:
    return files(PACKAGE_NAME).joinpath("plugin.py").read_text(encoding="utf-8")


def import_path_for(dest: Path, import_root: Path) -> str:
    """Return the dotted import path of dest, both relative to the project root."""
    rel = Path(os.path.normpath(dest))
    root = Path(os.path.normpath(import_root))
    if rel.is_absolute() or root.is_absolute():
        raise ValueError(f"Expected paths relative to the project root, got {dest}")
    try:
        parts = rel.relative_to(root).parts if root != Path(".") else rel.parts
    except ValueError:
        raise ValueError(f"{dest} is outside the import root {root}") from None
    if not parts or parts[0] == "..":
        raise ValueError(f"{dest} is outside the import root {root}")
    for part in parts:
        if not part.isidentifier():
            raise ValueError(f"{part!r} in {dest} is not a valid Python package name")
    return ".".join(parts)


def write_file(path: Path, content: str) -> None:
    path.write_text(HEADER + content, encoding="utf-8")
    logger.debug(f"Wrote {path}")


def install(path: str | Path, project_dir: Path = Path(".")) -> InstallResult:
    """Vendor the assertions into project_dir/path/assertlite.

    Raises FileNotFoundError if project_dir has no pyproject.toml and
    ValueError for an invalid manifest or destination.
    """
    if not str(path):
        raise ValueError("path to package is not specified")

    manifest = load_manifest(project_dir)

    rel_dest = Path(path) / PACKAGE_NAME
    import_path = import_path_for(rel_dest, manifest.import_root)

    dest = manifest.root / rel_dest
    dest.mkdir(parents=True, exist_ok=True)
    logger.info(f"Installing into {dest} as {import_path}")

    # Point the plugin at the vendored assertions instead of assertlite.
    support = support_source().replace(_MAIN_MODULE, import_path, 1)

    written = [dest / "__init__.py", dest / "plugin.py"]
    write_file(written[0], main_source())
    write_file(written[1], support)

    return InstallResult(project=manifest.name, import_path=import_path, written=written)
