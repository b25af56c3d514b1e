"""
Role specification lookup for subagents.

A role library is a directory of Markdown files; each file's name, turned
into a slug, addresses one role. Lookup is two-phase:

1. exact: a document whose slug equals the requested slug;
2. fuzzy: the first document whose slug *contains* the requested slug.

Fuzzy matching is best-effort and ambiguous by nature ("sales" may match
"sales-executive" or "inside-sales"). Documents are scanned in lexicographic
filename order so the winner is at least stable across platforms.

Documents are re-read on every call so library edits apply without restart.
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

logger = logging.getLogger(__name__)

# Guard against pathological files ending up in a prompt
MAX_ROLE_FILE_SIZE = 10 * 1024 * 1024

DEFAULT_SUBAGENT_SLUGS = (
    "sales-executive",
    "getty-images-executive",
    "ui-ux-designer",
    "api-documentor",
    "python-pro",
    "typescript-expert",
)

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def to_slug(name: str) -> str:
    return _NON_ALNUM.sub("-", name.lower()).strip("-")


@dataclass(frozen=True)
class RoleSpec:
    slug: str
    path: Path
    text: str


class RoleSpecResolver:

    def __init__(self, library_dir: Union[str, Path]):
        self.library_dir = Path(library_dir)

    def _documents(self) -> List[Path]:
        if not self.library_dir.is_dir():
            return []
        return sorted(
            (p for p in self.library_dir.iterdir() if p.is_file() and p.suffix.lower() == ".md"),
            key=lambda p: p.name,
        )

    def resolve(self, agent: str) -> Optional[RoleSpec]:
        if not self.library_dir.is_dir():
            logger.info("Role library %s not found; cannot resolve '%s'", self.library_dir, agent)
            return None

        slug = to_slug(agent)
        if not slug:
            return None

        documents = [(to_slug(p.stem), p) for p in self._documents()]

        # Oversized documents are skipped and the scan moves on
        for doc_slug, path in documents:
            if doc_slug == slug:
                role = self._load(doc_slug, path)
                if role is not None:
                    return role

        for doc_slug, path in documents:
            if slug in doc_slug:
                role = self._load(doc_slug, path)
                if role is not None:
                    logger.debug("Role '%s' resolved by substring match to %s", agent, path.name)
                    return role

        logger.info("No role specification matches '%s' in %s", agent, self.library_dir)
        return None

    def _load(self, slug: str, path: Path) -> Optional[RoleSpec]:
        size = path.stat().st_size
        if size > MAX_ROLE_FILE_SIZE:
            logger.warning("Skipping role file %s: too large (%d bytes)", path, size)
            return None
        return RoleSpec(slug=slug, path=path, text=path.read_text(encoding="utf-8"))

    def list_slugs(self) -> List[str]:
        try:
            slugs = [to_slug(p.stem) for p in self._documents()]
        except OSError as e:
            logger.warning("Could not list role library %s: %s", self.library_dir, e)
            slugs = []
        return slugs or list(DEFAULT_SUBAGENT_SLUGS)
