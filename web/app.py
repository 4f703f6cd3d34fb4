"""Flask application factory for the desktop automation web API."""

import asyncio
from collections import OrderedDict

from flask import Flask
from flask_cors import CORS

from agent.agent_context import AgentContext
from agent.config import AgentConfig
from agent.models import ChatCompletionClient
from desktop.base import Desktop
from desktop.factory import create_desktop
from guides.storage import GuideStore

# Finished runs whose metrics stay visible at /api/metrics.
MAX_TRACKED_RUNS = 20


def create_app(
    config: AgentConfig,
    desktop: Desktop | None = None,
    client: ChatCompletionClient | None = None,
    config_path: str = "config.json",
) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    CORS(app)

    # Shared state
    app.config["agent_config"] = config
    app.config["config_path"] = config_path
    app.config["desktop"] = desktop or create_desktop(config.desktop)
    app.config["client"] = client
    app.config["guide_store"] = GuideStore(
        config.guides_dir, preview_lines=config.guide_preview_lines
    )
    app.config["sessions"] = OrderedDict()  # session_id -> metrics summary

    from web.routes.chat import chat_bp
    from web.routes.guides import guides_bp
    from web.routes.settings import settings_bp
    from web.routes.metrics import metrics_bp

    app.register_blueprint(chat_bp, url_prefix="/api")
    app.register_blueprint(guides_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api")
    app.register_blueprint(metrics_bp, url_prefix="/api")

    return app


def new_context(app: Flask) -> AgentContext:
    """Context for one request, sharing the app's desktop backend."""
    config = app.config["agent_config"]
    context = AgentContext(
        config,
        desktop=app.config["desktop"],
        guide_store=app.config["guide_store"],
        client=app.config["client"],
    )
    return context


def record_run(app: Flask, context: AgentContext) -> None:
    """Keep the finished run's metrics summary, dropping the oldest beyond the cap."""
    if not context.config.telemetry.enabled:
        return
    sessions = app.config["sessions"]
    sessions[context.id] = context.telemetry.summary_dict()
    sessions.move_to_end(context.id)
    while len(sessions) > MAX_TRACKED_RUNS:
        sessions.popitem(last=False)


def run_async(coro):
    """Run a coroutine to completion on a private event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()
