"""Settings API routes: read, update and test the configuration."""

import json
import os
from dataclasses import asdict, fields, replace

from flask import Blueprint, current_app, jsonify, request

from agent.config import ApiConfig, load_config
from agent.exceptions import ConfigError, ReasoningClientError
from agent.models import ChatCompletionClient
from web.app import run_async

settings_bp = Blueprint("settings", __name__)


@settings_bp.route("/settings", methods=["GET"])
def get_settings():
    """Return current configuration with the API key withheld."""
    config = current_app.config["agent_config"]
    data = asdict(config)
    data["api"]["api_key"] = ""
    data["api"]["api_key_set"] = bool(config.api.api_key)
    return jsonify(data)


@settings_bp.route("/settings", methods=["POST"])
def save_settings():
    """Merge the posted fields into config.json and apply them."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "Invalid JSON payload"}), 400

    api = data.get("api")
    if isinstance(api, dict) and not api.get("api_key"):
        # An empty key means "unchanged"; the stored key is never sent to clients.
        api.pop("api_key", None)

    config_path = _config_path()
    previous = None
    existing: dict = {}
    if os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            previous = f.read()
        try:
            existing = json.loads(previous)
        except json.JSONDecodeError:
            existing = {}
    if not isinstance(existing, dict):
        existing = {}

    payload = _merge(existing, data)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)

    try:
        config = load_config(config_path)
    except ConfigError as e:
        _restore(config_path, previous)
        return jsonify({"error": str(e)}), 400

    current_app.config["agent_config"] = config
    return jsonify({"status": "saved"})


@settings_bp.route("/settings/test", methods=["POST"])
def test_settings():
    """Send a tiny prompt with the current (optionally overridden) API settings."""
    data = request.get_json(silent=True) or {}
    config = current_app.config["agent_config"]
    overrides = data.get("api") or {}
    if not isinstance(overrides, dict):
        return jsonify({"error": "api must be an object"}), 400

    known = {f.name for f in fields(ApiConfig)}
    api = replace(
        config.api,
        **{k: v for k, v in overrides.items() if k in known and v not in (None, "")},
    )
    if not api.api_key:
        return jsonify({"error": "API key not configured"}), 400

    client = current_app.config["client"] or ChatCompletionClient(
        api,
        connect_timeout=config.http.connect_timeout,
        read_timeout=config.http.read_timeout,
    )
    try:
        reply = run_async(client.test_connection())
    except ReasoningClientError as e:
        return jsonify({"error": str(e)}), 502
    return jsonify({"status": "ok", "message": reply})


def _merge(base: dict, updates: dict) -> dict:
    merged = dict(base)
    for key, value in updates.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def _restore(config_path: str, previous: str | None) -> None:
    if previous is None:
        os.remove(config_path)
        return
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(previous)


def _config_path() -> str:
    return current_app.config.get("config_path", "config.json")
