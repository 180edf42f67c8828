"""Collection registry: collection name → schema definition."""

from services.schema import BLOG_SCHEMA, SchemaDefinition


class UnknownCollection(LookupError):
    def __init__(self, name: str, available: list[str] | None = None):
        self.name = name
        self.available = available or []
        super().__init__(f"Unknown collection: {name!r}")


class CollectionRegistry:
    """Table of schemas shared by every document in a build.

    Populate with register(), then freeze() before handing the registry to
    concurrent readers. Lookups never fall back to a default schema.
    """

    def __init__(self, schemas: dict[str, SchemaDefinition] | None = None):
        self._schemas: dict[str, SchemaDefinition] = {}
        self._frozen = False
        for name, schema in (schemas or {}).items():
            self.register(name, schema)

    def register(self, name: str, schema: SchemaDefinition) -> None:
        if self._frozen:
            msg = f"Registry is frozen; cannot register {name!r}"
            raise RuntimeError(msg)
        self._schemas[name] = schema

    def lookup(self, name: str) -> SchemaDefinition:
        try:
            return self._schemas[name]
        except KeyError:
            raise UnknownCollection(name, self.names()) from None

    def freeze(self) -> "CollectionRegistry":
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def names(self) -> list[str]:
        return sorted(self._schemas)

    def __contains__(self, name) -> bool:
        return name in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)


def build_registry(strict: bool = False) -> CollectionRegistry:
    """Registry for the site's collections. Keys must match the folder names under the content dir."""
    blog = BLOG_SCHEMA
    if strict:
        blog = SchemaDefinition(blog.collection, blog.fields, allow_unknown=False)
    return CollectionRegistry({"blog": blog}).freeze()
