"""Collection schemas and front-matter validation.

A schema is plain data: an ordered tuple of field rules interpreted by one
generic `validate`. Raw front-matter values arrive untyped (whatever YAML
produced); each kind has a resolver that either returns the typed value or
a violation. Validation is all-or-nothing per document and reports every
failing field, never just the first.

Unknown front-matter keys are ignored by default: a schema is a minimum
contract, not an allow-list. Build a schema with ``allow_unknown=False`` to
report them as ``UnknownField`` instead.
"""

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable

MISSING_FIELD = "MissingField"
TYPE_MISMATCH = "TypeMismatch"
INVALID_DATE = "InvalidDate"
UNKNOWN_FIELD = "UnknownField"

_ISO_DATE_RE = re.compile(
    r"^([0-9]{4})-([0-9]{2})-([0-9]{2})(?:[T ][0-9:.+\-Z]+)?$", re.ASCII
)
_TRUE_STRINGS = {"true", "yes"}
_FALSE_STRINGS = {"false", "no"}


class FieldKind(str, Enum):
    STRING = "string"
    DATE = "date"
    STRING_ARRAY = "string[]"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class FieldRule:
    name: str
    kind: FieldKind
    required: bool = True
    coerce: bool = False
    non_empty: bool = False  # STRING_ARRAY only

    def __post_init__(self):
        try:
            kind = FieldKind(self.kind)
        except ValueError:
            known = ", ".join(k.value for k in FieldKind)
            msg = f"Unknown kind {self.kind!r} for field {self.name!r} (expected one of: {known})"
            raise ValueError(msg) from None
        object.__setattr__(self, "kind", kind)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "required": self.required,
            "coerce": self.coerce,
            "non_empty": self.non_empty,
        }


@dataclass(frozen=True)
class SchemaDefinition:
    collection: str
    fields: tuple[FieldRule, ...]
    allow_unknown: bool = True

    def __post_init__(self):
        object.__setattr__(self, "fields", tuple(self.fields))
        seen = set()
        for rule in self.fields:
            if rule.name in seen:
                msg = f"Duplicate field {rule.name!r} in schema {self.collection!r}"
                raise ValueError(msg)
            seen.add(rule.name)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(rule.name for rule in self.fields)

    def to_dict(self) -> dict:
        return {
            "collection": self.collection,
            "allow_unknown": self.allow_unknown,
            "fields": [rule.to_dict() for rule in self.fields],
        }


@dataclass(frozen=True)
class RawDocument:
    source_path: str
    raw_fields: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Violation:
    field: str
    code: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class ValidatedRecord:
    collection: str
    source_path: str
    fields: MappingProxyType

    ok = True

    def to_dict(self) -> dict:
        return {
            "ok": True,
            "collection": self.collection,
            "source_path": self.source_path,
            "fields": {k: _jsonable(v) for k, v in self.fields.items()},
        }


@dataclass(frozen=True)
class ValidationFailure:
    collection: str
    source_path: str
    violations: tuple[Violation, ...]

    ok = False

    @property
    def codes(self) -> dict[str, str]:
        """Map of field name to violation code."""
        return {v.field: v.code for v in self.violations}

    def to_dict(self) -> dict:
        return {
            "ok": False,
            "collection": self.collection,
            "source_path": self.source_path,
            "violations": [v.to_dict() for v in self.violations],
        }


def _jsonable(value):
    if isinstance(value, date):
        return value.isoformat()
    return value


def _type_name(value) -> str:
    return type(value).__name__


# ── Kind resolvers ───────────────────────────────────────────────────────────
# Each resolver returns (typed_value, None) or (None, (code, message)).


def _resolve_string(rule: FieldRule, value):
    if isinstance(value, str):
        return value, None
    return None, (TYPE_MISMATCH, f"must be a string, got {_type_name(value)}")


def _parse_iso_date(text: str) -> date | None:
    text = text.strip()
    match = _ISO_DATE_RE.match(text)
    if not match:
        return None
    try:
        if len(text) == 10:
            return date(int(match.group(1)), int(match.group(2)), int(match.group(3)))
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def _resolve_date(rule: FieldRule, value):
    # datetime is a date subclass; check it first
    if isinstance(value, datetime):
        return value.date(), None
    if isinstance(value, date):
        return value, None
    if not rule.coerce:
        return None, (TYPE_MISMATCH, f"must be a date, got {_type_name(value)}")
    if not isinstance(value, str):
        return None, (INVALID_DATE, f"cannot coerce {_type_name(value)} to a date")
    parsed = _parse_iso_date(value)
    if parsed is None:
        return None, (INVALID_DATE, f"{value!r} is not a valid YYYY-MM-DD date")
    return parsed, None


def _resolve_string_array(rule: FieldRule, value):
    if not isinstance(value, list | tuple):
        return None, (TYPE_MISMATCH, f"must be a list of strings, got {_type_name(value)}")
    for i, item in enumerate(value):
        if not isinstance(item, str):
            return None, (
                TYPE_MISMATCH,
                f"element {i} must be a string, got {_type_name(item)}",
            )
    if rule.non_empty and not value:
        return None, (TYPE_MISMATCH, "must contain at least one element")
    return list(value), None


def _resolve_boolean(rule: FieldRule, value):
    if isinstance(value, bool):
        return value, None
    if rule.coerce and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_STRINGS:
            return True, None
        if lowered in _FALSE_STRINGS:
            return False, None
    return None, (TYPE_MISMATCH, f"must be a boolean, got {_type_name(value)}")


_RESOLVERS: dict[FieldKind, Callable[[FieldRule, Any], tuple]] = {
    FieldKind.STRING: _resolve_string,
    FieldKind.DATE: _resolve_date,
    FieldKind.STRING_ARRAY: _resolve_string_array,
    FieldKind.BOOLEAN: _resolve_boolean,
}


# ── Validation ───────────────────────────────────────────────────────────────


def validate(
    schema: SchemaDefinition, document: RawDocument
) -> ValidatedRecord | ValidationFailure:
    """Validate one document's raw front-matter against a schema.

    Returns a ValidatedRecord when every declared field resolves, otherwise a
    ValidationFailure listing one violation per failing field in declaration
    order. Never raises for bad input data.
    """
    raw = document.raw_fields or {}
    typed = {}
    violations = []

    for rule in schema.fields:
        if rule.name not in raw or raw[rule.name] is None:
            # YAML "key:" with no value parses to None; null counts as absent, not a type error
            if rule.required:
                violations.append(
                    Violation(rule.name, MISSING_FIELD, f"Missing required field: {rule.name!r}")
                )
            continue

        value, error = _RESOLVERS[rule.kind](rule, raw[rule.name])
        if error is not None:
            code, message = error
            violations.append(Violation(rule.name, code, f"Field {rule.name!r} {message}"))
            continue
        typed[rule.name] = value

    if not schema.allow_unknown:
        declared = set(schema.field_names)
        for name in sorted(str(k) for k in raw if k not in declared):
            violations.append(
                Violation(name, UNKNOWN_FIELD, f"Field {name!r} is not declared in the schema")
            )

    if violations:
        return ValidationFailure(schema.collection, document.source_path, tuple(violations))
    return ValidatedRecord(schema.collection, document.source_path, MappingProxyType(typed))


def define_schema(collection: str, *rules: FieldRule, allow_unknown: bool = True):
    return SchemaDefinition(collection, tuple(rules), allow_unknown=allow_unknown)


BLOG_SCHEMA = define_schema(
    "blog",
    FieldRule("title", FieldKind.STRING),
    FieldRule("description", FieldKind.STRING),
    FieldRule("date", FieldKind.DATE, coerce=True),  # ISO: YYYY-MM-DD
    FieldRule("tags", FieldKind.STRING_ARRAY),
)
