"""Per-class field exclusion policy.

The serialized form ``class1:field1,field2;class2:*`` is parsed once at the
configuration boundary; everything past that works on :class:`ExclusionSpec`
values held by an immutable :class:`ExclusionPolicy`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Optional, Union

from .logging import get_logger

_LOGGER = get_logger("exclusion")

ALL_FIELDS = "*"


@dataclass(frozen=True)
class ExclusionSpec:
    """Fields suppressed for one class: every field, or an explicit set."""

    fields: FrozenSet[str] = frozenset()
    exclude_all: bool = False

    @classmethod
    def everything(cls) -> "ExclusionSpec":
        return cls(exclude_all=True)

    @classmethod
    def of(cls, fields: Iterable[str]) -> "ExclusionSpec":
        names = frozenset(name.strip() for name in fields if name and name.strip())
        if not names:
            return cls.everything()
        return cls(fields=names)

    def excludes(self, field_name: str) -> bool:
        return self.exclude_all or field_name in self.fields


ExclusionEntry = Union[ExclusionSpec, Iterable[str], str, None]


def parse_exclusion_map(text: Optional[str]) -> Dict[str, ExclusionSpec]:
    """Parse ``class1:f1,f2;class2:*`` into a class -> spec mapping.

    Entries without a colon or with an empty class name are skipped. An empty
    field list or ``*`` excludes the whole class.
    """
    result: Dict[str, ExclusionSpec] = {}
    if not text:
        return result
    for raw_entry in text.split(";"):
        entry = raw_entry.strip()
        if not entry:
            continue
        class_name, sep, fields_text = entry.partition(":")
        class_name = class_name.strip()
        if not sep or not class_name:
            _LOGGER.debug("Skipping malformed exclusion entry %r", entry)
            continue
        fields_text = fields_text.strip()
        if fields_text == ALL_FIELDS or not fields_text:
            result[class_name] = ExclusionSpec.everything()
        else:
            result[class_name] = ExclusionSpec.of(fields_text.split(","))
    return result


def format_exclusion_map(specs: Mapping[str, ExclusionSpec]) -> str:
    """Serialize specs back to the ``class:fields;...`` form."""
    entries = []
    for class_name, spec in specs.items():
        fields = ALL_FIELDS if spec.exclude_all else ",".join(sorted(spec.fields))
        entries.append(f"{class_name}:{fields}")
    return ";".join(entries)


def _coerce(entry: ExclusionEntry) -> ExclusionSpec:
    if isinstance(entry, ExclusionSpec):
        return entry
    if entry is None:
        return ExclusionSpec.everything()
    if isinstance(entry, str):
        if entry.strip() == ALL_FIELDS:
            return ExclusionSpec.everything()
        return ExclusionSpec.of(entry.split(","))
    return ExclusionSpec.of(entry)


def _simple_name(name: str) -> str:
    return name.rsplit(".", 1)[-1]


class ExclusionPolicy:
    """Read-only snapshot deciding which fields are left out of documents."""

    def __init__(self, specs: Optional[Mapping[str, ExclusionEntry]] = None) -> None:
        coerced = {name.strip(): _coerce(entry) for name, entry in (specs or {}).items() if name.strip()}
        self._specs: Mapping[str, ExclusionSpec] = MappingProxyType(coerced)

    @classmethod
    def from_config(
        cls,
        classes: Iterable[str] = (),
        fields: Union[str, Mapping[str, ExclusionEntry], None] = None,
    ) -> "ExclusionPolicy":
        """Build a policy from excluded class names plus a field map.

        Classes listed without a field entry exclude every field.
        """
        specs: Dict[str, ExclusionSpec] = {}
        for name in classes:
            if name and name.strip():
                specs[name.strip()] = ExclusionSpec.everything()
        if isinstance(fields, str):
            specs.update(parse_exclusion_map(fields))
        elif fields:
            for name, entry in fields.items():
                specs[name.strip()] = _coerce(entry)
        return cls(specs)

    @property
    def specs(self) -> Mapping[str, ExclusionSpec]:
        return self._specs

    def spec_for(self, class_name: str) -> Optional[ExclusionSpec]:
        """Return the configured spec for ``class_name``.

        Entries match the qualified name exactly, by ``.Simple`` suffix, or
        when a qualified entry ends with the class's simple name.
        """
        if not class_name:
            return None
        exact = self._specs.get(class_name)
        if exact is not None:
            return exact
        simple = _simple_name(class_name)
        for entry_name, spec in self._specs.items():
            if class_name.endswith("." + entry_name) or entry_name.endswith("." + simple):
                return spec
        return None

    def is_class_excluded(self, class_name: str) -> bool:
        return self.spec_for(class_name) is not None

    def excluded_fields_for(self, class_name: str) -> Union[str, FrozenSet[str], None]:
        """Return ``"*"`` for whole-class exclusion, the field set, or None."""
        spec = self.spec_for(class_name)
        if spec is None:
            return None
        if spec.exclude_all:
            return ALL_FIELDS
        return spec.fields

    def is_field_excluded(
        self, class_name: str, field_name: str, forwarded: Iterable[str] = ()
    ) -> bool:
        if field_name in frozenset(forwarded):
            return True
        spec = self.spec_for(class_name)
        if spec is None:
            return False
        return spec.excludes(field_name)

    def forward(self, class_name: str, forwarded: Iterable[str] = ()) -> FrozenSet[str]:
        """Return the field names a superclass of ``class_name`` must also skip."""
        spec = self.spec_for(class_name)
        names = frozenset(forwarded)
        if spec is None or spec.exclude_all:
            return names
        return names | spec.fields

    def with_fields(self, class_name: str, fields: Optional[Iterable[str]]) -> "ExclusionPolicy":
        """Return a copy with ``class_name`` excluding ``fields`` (None or empty: all)."""
        specs = dict(self._specs)
        specs[class_name] = ExclusionSpec.everything() if not fields else ExclusionSpec.of(fields)
        return ExclusionPolicy(specs)

    def without(self, class_name: str) -> "ExclusionPolicy":
        specs = {name: spec for name, spec in self._specs.items() if name != class_name}
        return ExclusionPolicy(specs)

    def to_string(self) -> str:
        return format_exclusion_map(self._specs)

    def __bool__(self) -> bool:
        return bool(self._specs)

    def __repr__(self) -> str:
        return f"ExclusionPolicy({self.to_string()!r})"


__all__ = [
    "ALL_FIELDS",
    "ExclusionPolicy",
    "ExclusionSpec",
    "format_exclusion_map",
    "parse_exclusion_map",
]
