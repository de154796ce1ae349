"""Smart comment tags and capability omission."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from pyconnfilter._constants import OMIT_ALIASES, TAG_OMIT

_TAG_LINE_RE = re.compile(r"^@([a-zA-Z][a-zA-Z0-9_]*)(?:\s+(.*))?$")


@dataclass(frozen=True)
class SmartComment:
    tags: dict[str, Any] = field(default_factory=dict)
    description: str = ""


def parse_smart_comment(text: str | None) -> SmartComment:
    """Split a database comment into ``@tag`` lines and a description.

    ``@name value`` sets the tag to ``value``, a bare ``@name`` sets it to
    ``True``, and repeating a tag collects its values into a list. Tags are
    only recognized at the top of the comment; the first non-tag line starts
    the description.
    """
    if not text:
        return SmartComment()

    tags: dict[str, Any] = {}
    lines = text.replace("\r\n", "\n").split("\n")
    index = 0
    for index, line in enumerate(lines):
        match = _TAG_LINE_RE.match(line.strip())
        if match is None:
            break
        name, value = match.group(1), match.group(2)
        value = value.strip() if value is not None and value.strip() else True
        if name in tags:
            existing = tags[name]
            tags[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            tags[name] = value
    else:
        index = len(lines)

    description = "\n".join(lines[index:]).strip()
    return SmartComment(tags=tags, description=description)


def _omit_entries(value: Any) -> set[str] | None:
    """Expand an ``@omit`` tag value; ``None`` means everything is omitted."""
    values = value if isinstance(value, list) else [value]
    entries: set[str] = set()
    for item in values:
        if item is True:
            return None
        for part in str(item).split(","):
            part = part.strip()
            if not part:
                continue
            entries.add(OMIT_ALIASES.get(part, part))
    return entries


def is_omitted(entity: Any, capability: str) -> bool:
    """Return True if ``entity`` is tagged ``@omit`` for ``capability``."""
    tags = getattr(entity, "tags", None) or {}
    if TAG_OMIT not in tags:
        return False
    entries = _omit_entries(tags[TAG_OMIT])
    if entries is None:
        return True
    return capability in entries
