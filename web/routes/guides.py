"""Guide API routes: browse, search and create guides."""

from flask import Blueprint, current_app, jsonify, request

from agent.exceptions import (
    ApiKeyMissingError,
    GuideCreationError,
    GuideNotFoundError,
    GuidePathError,
    ReasoningClientError,
)
from guides.creator import GuideCreator
from tools.guide_search import GUIDE_NOT_FOUND, search_guide
from web.app import new_context, record_run, run_async

guides_bp = Blueprint("guides", __name__)


@guides_bp.route("/guides", methods=["GET"])
def list_guides():
    store = current_app.config["guide_store"]
    try:
        entries = store.list(request.args.get("path") or None)
    except GuidePathError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({
        "entries": [
            {"name": e.name, "path": e.path, "is_dir": e.is_dir} for e in entries
        ]
    })


@guides_bp.route("/guides/preview", methods=["GET"])
def preview_guide():
    return _read_guide(preview=True)


@guides_bp.route("/guides/read", methods=["GET"])
def read_guide():
    return _read_guide(preview=False)


@guides_bp.route("/guides/index", methods=["GET"])
def guide_index():
    store = current_app.config["guide_store"]
    return jsonify({
        "guides": [{"path": e.path, "title": e.title} for e in store.index()]
    })


@guides_bp.route("/guides/search", methods=["POST"])
def search():
    """Run the guide search sub-agent for a query."""
    data = request.get_json(silent=True) or {}
    query = str(data.get("query", "")).strip()
    if not query:
        return jsonify({"error": "No query provided"}), 400

    context = new_context(current_app)
    try:
        result = run_async(search_guide(query, context))
    except ApiKeyMissingError as e:
        return jsonify({"error": str(e)}), 400
    except ReasoningClientError as e:
        return jsonify({"error": str(e)}), 502
    finally:
        record_run(current_app, context)
    return jsonify({"result": result, "found": result != GUIDE_NOT_FOUND})


@guides_bp.route("/guides/create", methods=["POST"])
def create():
    """Create a guide from free-form text."""
    data = request.get_json(silent=True) or {}
    user_input = str(data.get("user_input", "")).strip()
    if not user_input:
        return jsonify({"error": "No guide text provided"}), 400

    context = new_context(current_app)
    creator = GuideCreator(context)
    try:
        path, title = run_async(creator.create(user_input))
    except (ApiKeyMissingError, GuideCreationError) as e:
        return jsonify({"error": str(e)}), 400
    except ReasoningClientError as e:
        return jsonify({"error": str(e)}), 502
    finally:
        record_run(current_app, context)
    return jsonify({"path": path, "title": title})


def _read_guide(preview: bool):
    path = request.args.get("path", "").strip()
    if not path:
        return jsonify({"error": "No path provided"}), 400

    store = current_app.config["guide_store"]
    try:
        content = store.preview(path) if preview else store.read(path)
    except GuideNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except GuidePathError as e:
        return jsonify({"error": str(e)}), 400
    return jsonify({"path": path, "content": content})
