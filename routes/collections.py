"""Collection diagnostics endpoints: schema listing, folder checks, ad-hoc validation."""

from flask import Blueprint, current_app, jsonify, request

from services.content import FrontmatterError, check_collection, parse_frontmatter
from services.registry import UnknownCollection
from services.schema import RawDocument, validate

bp = Blueprint("collections", __name__)


def _registry():
    return current_app.config["COLLECTIONS"]


def _unknown(e: UnknownCollection):
    return jsonify({"error": str(e), "available_collections": e.available}), 404


@bp.route("/api/collections")
def collections_list():
    """Registered collections and their field tables."""
    registry = _registry()
    return jsonify([registry.lookup(name).to_dict() for name in registry.names()])


@bp.route("/api/collections/<name>")
def collection_get(name):
    try:
        schema = _registry().lookup(name)
    except UnknownCollection as e:
        return _unknown(e)
    return jsonify(schema.to_dict())


@bp.route("/api/collections/<name>/check")
def collection_check(name):
    """Validate every document in the collection folder. Failures are reported, not errors."""
    try:
        report = check_collection(_registry(), name, current_app.config["CONTENT_DIR"])
    except UnknownCollection as e:
        return _unknown(e)
    return jsonify(report.to_dict())


@bp.route("/api/collections/<name>/validate", methods=["POST"])
def collection_validate(name):
    """Validate a single document given as raw front-matter or full markdown content."""
    try:
        schema = _registry().lookup(name)
    except UnknownCollection as e:
        return _unknown(e)

    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400

    source_path = data.get("source_path", "(request)")
    if not isinstance(source_path, str):
        return jsonify({"error": "source_path must be a string"}), 400

    if "frontmatter" in data:
        fm = data["frontmatter"]
        if not isinstance(fm, dict):
            return jsonify({"error": "frontmatter must be an object"}), 400
    elif "content" in data:
        if not isinstance(data["content"], str):
            return jsonify({"error": "content must be a string"}), 400
        try:
            fm, _ = parse_frontmatter(data["content"])
        except FrontmatterError as e:
            return jsonify({"error": str(e)}), 400
    else:
        return jsonify({"error": "frontmatter or content required"}), 400

    result = validate(schema, RawDocument(source_path, fm))
    return jsonify(result.to_dict())
