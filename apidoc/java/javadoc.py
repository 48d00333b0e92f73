"""Javadoc comment parsing."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

_HTML_TAG_PATTERN = re.compile(
    r"</?(p|br|li|ul|ol|h[1-6]|div|span|code|pre|b|i|em|strong|tt|a|img|table|thead|tbody|tr|td|th|hr)(\s+[^>]*)?/?>",
    re.IGNORECASE,
)
_INLINE_TAG_PATTERN = re.compile(r"\{@\w+\s*([^}]*)\}")
_TAG_PATTERN = re.compile(r"^@(\w+)\s*(.*)$")


@dataclass
class Javadoc:
    """Description text and ``@param`` texts of a ``/** ... */`` comment."""

    description: str = ""
    params: Dict[str, str] = field(default_factory=dict)

    @property
    def summary(self) -> str:
        return collapse(self.description)


def collapse(text: str) -> str:
    return " ".join(text.split())


def strip_html(text: str) -> str:
    return _HTML_TAG_PATTERN.sub("", text)


def is_javadoc(text: str) -> bool:
    return text.startswith("/**") and not text.startswith("/**/")


def _content_lines(text: str) -> List[str]:
    body = text.strip()
    if body.startswith("/**"):
        body = body[3:]
    elif body.startswith("/*"):
        body = body[2:]
    if body.endswith("*/"):
        body = body[:-2]
    lines = []
    for raw in body.splitlines():
        line = raw.strip()
        if line.startswith("*"):
            line = line[1:].strip()
        lines.append(line)
    return lines


def parse_javadoc(text: Optional[str]) -> Javadoc:
    """Split a Javadoc comment into its description and ``@tag`` sections."""
    if not text:
        return Javadoc()

    description: List[str] = []
    blocks: List[List[str]] = []
    for line in _content_lines(text):
        cleaned = _INLINE_TAG_PATTERN.sub(lambda match: match.group(1).strip(), strip_html(line)).strip()
        if line.startswith("@"):
            blocks.append([cleaned])
        elif blocks:
            if cleaned:
                blocks[-1].append(cleaned)
        else:
            description.append(cleaned)

    doc = Javadoc(description="\n".join(description).strip())
    for block in blocks:
        match = _TAG_PATTERN.match(" ".join(block))
        if not match:
            continue
        tag, rest = match.group(1), match.group(2).strip()
        if tag == "param" and rest:
            name, _, param_text = rest.partition(" ")
            doc.params[name.strip()] = collapse(param_text)
    return doc


__all__ = ["Javadoc", "collapse", "is_javadoc", "parse_javadoc", "strip_html"]
