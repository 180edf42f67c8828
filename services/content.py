"""Content tree access: front-matter parsing, document discovery, collection checks."""

import logging
import os
import re
from dataclasses import dataclass, field

import yaml

from config import CONTENT_DIR, CONTENT_EXTENSIONS
from services.registry import CollectionRegistry
from services.schema import (
    RawDocument,
    ValidatedRecord,
    ValidationFailure,
    Violation,
    validate,
)

log = logging.getLogger(__name__)

INVALID_FRONTMATTER = "InvalidFrontmatter"
FRONTMATTER_FIELD = "(frontmatter)"


class FrontmatterError(ValueError):
    """Front-matter block exists but is not valid YAML or not a mapping."""


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 booleans: only true/false, so `title: yes` stays a string."""


_FrontmatterLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
_FrontmatterLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)


def parse_frontmatter(content: str) -> tuple[dict, str]:
    """Extract YAML front-matter and body from file content.

    Dates are left as datetime.date so the validator owns coercion. A leading
    byte-order mark is ignored.
    """
    content = content.removeprefix("\ufeff")
    if not content.startswith("---"):
        return {}, content

    lines = content.split("\n")
    end_idx = None
    for i, line in enumerate(lines[1:], 1):
        if line.strip() == "---":
            end_idx = i
            break

    if end_idx is None:
        return {}, content

    try:
        raw = yaml.load("\n".join(lines[1:end_idx]), Loader=_FrontmatterLoader)  # noqa: S506
    except yaml.YAMLError as e:
        raise FrontmatterError(f"Malformed YAML front-matter: {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise FrontmatterError(f"Front-matter must be a mapping, got {type(raw).__name__}")

    body = "\n".join(lines[end_idx + 1 :]).lstrip("\n")
    return raw, body


def load_document(path: str, content_dir: str = None) -> RawDocument:
    """Read a content file into a RawDocument. source_path is relative to content_dir."""
    content_dir = content_dir or CONTENT_DIR
    with open(path, encoding="utf-8-sig") as f:
        fm, _ = parse_frontmatter(f.read())
    rel_path = os.path.relpath(path, content_dir).replace(os.sep, "/")
    return RawDocument(rel_path, fm)


def discover(collection: str, content_dir: str = None) -> list[str]:
    """List content files for a collection, recursively, skipping hidden and _-prefixed entries."""
    content_dir = content_dir or CONTENT_DIR
    root = os.path.join(content_dir, collection)
    if not os.path.isdir(root):
        return []

    found = []
    for dirpath, dirs, files in os.walk(root):
        dirs[:] = [d for d in dirs if not d.startswith((".", "_"))]
        for fname in files:
            if fname.startswith((".", "_")):
                continue
            if os.path.splitext(fname)[1].lower() in CONTENT_EXTENSIONS:
                found.append(os.path.join(dirpath, fname))
    return sorted(found)


@dataclass
class CollectionReport:
    collection: str
    records: list[ValidatedRecord] = field(default_factory=list)
    failures: list[ValidationFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        return {
            "collection": self.collection,
            "ok": self.ok,
            "checked": len(self.records) + len(self.failures),
            "valid": len(self.records),
            "records": [r.to_dict() for r in self.records],
            "failures": [f.to_dict() for f in self.failures],
        }


def check_collection(
    registry: CollectionRegistry, collection: str, content_dir: str = None
) -> CollectionReport:
    """Validate every document in a collection folder.

    Raises UnknownCollection for unregistered names. Bad documents are
    reported in the result and logged; they never stop the rest of the scan.
    """
    content_dir = content_dir or CONTENT_DIR
    schema = registry.lookup(collection)
    report = CollectionReport(collection)

    for path in discover(collection, content_dir):
        try:
            document = load_document(path, content_dir)
        except (OSError, UnicodeDecodeError, FrontmatterError) as e:
            rel_path = os.path.relpath(path, content_dir).replace(os.sep, "/")
            result = ValidationFailure(
                collection,
                rel_path,
                (Violation(FRONTMATTER_FIELD, INVALID_FRONTMATTER, str(e)),),
            )
        else:
            result = validate(schema, document)

        if result.ok:
            report.records.append(result)
        else:
            log.warning(
                "%s: %s",
                result.source_path,
                "; ".join(v.message for v in result.violations),
            )
            report.failures.append(result)

    log.info(
        "Checked collection %r: %d valid, %d failed",
        collection,
        len(report.records),
        len(report.failures),
    )
    return report


def check_all(registry: CollectionRegistry, content_dir: str = None) -> list[CollectionReport]:
    """Check every registered collection."""
    return [check_collection(registry, name, content_dir) for name in registry.names()]
