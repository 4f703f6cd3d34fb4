"""Chat API route: run the agent on one user request."""

from flask import Blueprint, current_app, jsonify, request

from agent.agent import Agent
from agent.exceptions import ApiKeyMissingError, ReasoningClientError
from web.app import new_context, record_run, run_async

chat_bp = Blueprint("chat", __name__)


@chat_bp.route("/chat/send", methods=["POST"])
def send_message():
    """Run the agent to completion and return its steps and final response."""
    data = request.get_json(silent=True) or {}
    message = str(data.get("message", "")).strip()
    include_screen = data.get("include_screen", True)

    if not message:
        return jsonify({"error": "No message provided"}), 400
    if not isinstance(include_screen, bool):
        return jsonify({"error": "include_screen must be a boolean"}), 400

    context = new_context(current_app)
    agent = Agent(context)
    try:
        result = run_async(agent.run(message, include_screen=include_screen))
    except ApiKeyMissingError as e:
        return jsonify({"error": str(e)}), 400
    except ReasoningClientError as e:
        return jsonify({"error": str(e)}), 502
    finally:
        record_run(current_app, context)

    return jsonify({"session_id": context.id, **result.to_dict()})
