"""Skill discovery - scans directories for SKILL.md files."""

import logging
import os
from pathlib import Path

import yaml

from gateway.events.models import Skill

logger = logging.getLogger(__name__)

SKILL_FILENAME = "SKILL.md"
_DELIMITER = "---"


def parse_skill_file(path: Path) -> Skill:
    """Read name and description from the YAML front matter of a SKILL.md.

    The first line must be ``---``; front matter runs until the next ``---``.
    Raises ValueError if the front matter is missing, malformed, or unnamed.
    """
    lines = path.read_text(encoding="utf-8").splitlines()
    if not lines or lines[0].strip() != _DELIMITER:
        raise ValueError(f"{path}: missing opening frontmatter delimiter")

    front: list[str] = []
    for line in lines[1:]:
        if line.strip() == _DELIMITER:
            break
        front.append(line)
    if not front:
        raise ValueError(f"{path}: empty frontmatter")

    try:
        data = yaml.safe_load("\n".join(front))
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: parsing frontmatter: {e}") from e
    if not isinstance(data, dict) or not data.get("name"):
        raise ValueError(f"{path}: frontmatter missing name")

    return Skill(
        name=str(data["name"]),
        description=str(data.get("description") or ""),
        path=str(path),
    )


class SkillRegistry:
    def __init__(self):
        self._skills: list[Skill] = []

    def scan(self, dirs: list[str]) -> list[Skill]:
        """Replace the registry contents with every skill found under ``dirs``.

        Unreadable paths and malformed files are skipped.
        """
        found: list[Skill] = []
        for directory in dirs:
            if not os.path.isdir(directory):
                logger.warning("Skill directory not found: %s", directory)
                continue
            for root, _subdirs, files in os.walk(directory):
                if SKILL_FILENAME not in files:
                    continue
                path = Path(root) / SKILL_FILENAME
                try:
                    found.append(parse_skill_file(path))
                except (OSError, UnicodeDecodeError, ValueError) as e:
                    logger.debug("Skipping skill file %s: %s", path, e)

        found.sort(key=lambda s: s.path)
        self._skills = found
        logger.info("Discovered %d skills", len(found))
        return found

    def skills(self) -> list[Skill]:
        return list(self._skills)

    def filter(self, allowlist: list[str]) -> list[Skill]:
        """Skills named in the allowlist; an empty allowlist keeps everything."""
        if not allowlist:
            return list(self._skills)
        allowed = set(allowlist)
        return [s for s in self._skills if s.name in allowed]
