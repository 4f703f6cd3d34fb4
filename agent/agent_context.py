"""AgentContext: per-run container shared by the primary loop and its sub-agents."""

from __future__ import annotations

import logging
import uuid

from agent.config import AgentConfig
from agent.exceptions import ApiKeyMissingError
from agent.logs import build_logger
from agent.models import ChatCompletionClient
from agent.telemetry import Telemetry
from desktop.base import Desktop
from desktop.factory import create_desktop
from guides.storage import GuideStore
from prompts.template_engine import PromptTemplateEngine


class AgentContext:
    """
    Collaborators for one user interaction: the reasoning client, the desktop
    backend, the guide corpus, prompt templates and telemetry. Tool registries
    are not held here; each loop receives its own.
    """

    def __init__(
        self,
        config: AgentConfig,
        desktop: Desktop | None = None,
        guide_store: GuideStore | None = None,
        client: ChatCompletionClient | None = None,
        session_id: str | None = None,
    ):
        self.id: str = session_id or uuid.uuid4().hex[:12]
        self.config = config
        self.desktop = desktop or create_desktop(config.desktop)
        self.guide_store = guide_store or GuideStore(
            config.guides_dir, preview_lines=config.guide_preview_lines
        )
        self.client = client or ChatCompletionClient.from_config(config)
        self.prompt_engine = PromptTemplateEngine(profile=config.prompt_profile)
        self.telemetry: Telemetry = Telemetry(config.telemetry, self.id)

    def logger(self, name: str, filename: str) -> logging.Logger:
        return build_logger(self.config.log_dir, name, filename)

    def require_api_key(self) -> None:
        """Raise before any remote call is attempted without credentials."""
        if not self.config.api.api_key:
            raise ApiKeyMissingError("API key not configured")
