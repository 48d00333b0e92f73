"""Linting utilities for generated endpoint documents."""

from __future__ import annotations

from typing import List


def _is_rule(line: str) -> bool:
    return line == "---"


def _is_table_row(line: str) -> bool:
    return line.startswith("|")


class MarkdownLinter:
    """Normalises blank lines around headings, tables, rules and code fences."""

    def lint(self, markdown: str) -> str:
        normalized = markdown.replace("\r\n", "\n").replace("\r", "\n")
        cleaned: List[str] = []
        in_code = False
        previous_blank = False

        for line in normalized.split("\n"):
            stripped = line.rstrip()
            if stripped.startswith("```"):
                if not in_code and cleaned and cleaned[-1] != "":
                    cleaned.append("")
                in_code = not in_code
                cleaned.append(stripped)
                previous_blank = False
                continue

            if not in_code:
                if not stripped:
                    if previous_blank or not cleaned:
                        continue
                    previous_blank = True
                    cleaned.append("")
                    continue
                if cleaned and cleaned[-1] != "":
                    previous = cleaned[-1]
                    # A rule directly under text would turn that text into a heading.
                    if stripped.startswith("#") or _is_rule(stripped):
                        cleaned.append("")
                    elif _is_table_row(stripped) and not _is_table_row(previous):
                        cleaned.append("")
                    elif previous.startswith("#") or _is_rule(previous):
                        cleaned.append("")

            cleaned.append(stripped)
            previous_blank = False

        while cleaned and cleaned[-1] == "":
            cleaned.pop()

        return "\n".join(cleaned) + "\n"


__all__ = ["MarkdownLinter"]
