"""Shared constants and path configuration for the blog content checker."""

import json
import os

_SETTINGS_FILE = os.path.expanduser("~/.config/blog-content/settings.json")
_DEFAULT_CONTENT_DIR = os.path.join("src", "content")


def _read_setting(*keys, default=None):
    """Read a nested setting from the global settings file."""
    try:
        with open(_SETTINGS_FILE) as f:
            data = json.load(f)
        for k in keys:
            data = data[k]
        return data
    except (FileNotFoundError, json.JSONDecodeError, KeyError, TypeError):
        return default


def get_content_dir(override: str | None = None) -> str:
    """Resolve the content root. CLI override wins over the settings file."""
    return os.path.abspath(override or _read_setting("content_dir", default=_DEFAULT_CONTENT_DIR))


CONTENT_DIR = get_content_dir()
CONTENT_EXTENSIONS = (".md", ".mdx")
STRICT_UNKNOWN_FIELDS = bool(_read_setting("strict_unknown_fields", default=False))
PORT = _read_setting("port", default=4321)
