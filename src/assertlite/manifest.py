"""Read the consumer project's pyproject.toml."""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

MANIFEST_NAME = "pyproject.toml"


class AssertliteSettings(BaseModel):
    """The optional ``[tool.assertlite]`` table."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)
    import_root: str | None = Field(default=None, alias="import-root")


class ProjectTable(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("project name must not be empty")
        return v.strip()


class ProjectManifest(BaseModel):
    """What the installer needs to know about the consumer project.

    Attributes:
        name: The ``[project].name`` of the consumer.
        root: Directory holding the manifest.
        import_root: Directory whose children are top-level import packages,
            relative to root.
    """

    name: str
    root: Path
    import_root: Path


def load_manifest(project_dir: Path) -> ProjectManifest:
    """Load pyproject.toml from project_dir and resolve the import root."""
    path = project_dir / MANIFEST_NAME
    logger.debug(f"Reading manifest {path}")

    with open(path, "rb") as f:
        try:
            raw = tomllib.load(f)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"Invalid TOML in {path}: {exc}") from exc

    try:
        project = ProjectTable(**raw.get("project", {}))
        settings = AssertliteSettings(**raw.get("tool", {}).get("assertlite", {}))
    except ValidationError as exc:
        raise ValueError(f"Invalid manifest {path}:\n{exc}") from exc

    if settings.import_root is not None:
        import_root = Path(settings.import_root)
    elif (project_dir / "src").is_dir():
        import_root = Path("src")
    else:
        import_root = Path(".")

    logger.debug(f"Project {project.name!r}, import root {import_root}")
    return ProjectManifest(name=project.name, root=project_dir, import_root=import_root)
