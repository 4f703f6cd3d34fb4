"""Build the system prompt and the screen-bearing user messages."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from agent.exceptions import DesktopUnsupportedError

if TYPE_CHECKING:
    from agent.agent_context import AgentContext
    from tools.tool_registry import ToolRegistry


class ConversationBuilder:
    """Assembles wire-format messages for the primary agent."""

    def __init__(self, context: "AgentContext"):
        self.context = context
        self._logger = context.logger("conversation", "agent_loop.log")

    def build_system_prompt(self, registry: "ToolRegistry") -> str:
        engine = self.context.prompt_engine
        return engine.render(
            "agent.system.main.md",
            {
                "tool_descriptions": registry.get_tool_descriptions(),
                "guide_index": self._guide_index_section(),
            },
        )

    def build_initial_messages(
        self,
        user_message: str,
        include_screen: bool,
        registry: "ToolRegistry",
    ) -> list[dict]:
        """Return ``[system, user]``; the user turn carries the screen when vision is on."""
        system = {"role": "system", "content": self.build_system_prompt(registry)}
        plain = {"role": "user", "content": user_message}

        if not (include_screen and self.context.config.api.supports_vision):
            return [system, plain]

        try:
            screenshot, ui_tree = self.capture_screen_context()
        except DesktopUnsupportedError as e:
            self._logger.info("Screen capture unavailable, sending text only: %s", e)
            return [system, plain]

        text = f"Current screen state:\n\nUI Elements:\n{ui_tree}\n\nUser request: {user_message}"
        return [system, self._multimodal(text, screenshot)]

    def screen_update_message(self) -> dict | None:
        """Fresh screenshot and element tree, or None when capture fails."""
        try:
            screenshot, ui_tree = self.capture_screen_context()
        except Exception as e:
            self._logger.warning("Screen refresh failed: %s", e)
            return None
        return self._multimodal(f"Updated screen state:\n\nUI Elements:\n{ui_tree}", screenshot)

    def capture_screen_context(self) -> tuple[str, str]:
        """Capture ``(data_uri, ui_tree_json)``. A failed tree walk yields an empty tree."""
        desktop = self.context.desktop
        screenshot = desktop.capture_screen()
        try:
            tree = desktop.active_window_tree(self.context.config.desktop.ui_tree_depth)
            ui_tree = json.dumps(tree.to_dict(), indent=2, ensure_ascii=False)
        except Exception as e:
            self._logger.info("UI tree unavailable: %s", e)
            ui_tree = ""
        return screenshot, ui_tree

    def _multimodal(self, text: str, screenshot: str) -> dict:
        return {
            "role": "user",
            "content": [
                {"type": "text", "text": text},
                {
                    "type": "image_url",
                    "image_url": {
                        "url": screenshot,
                        "detail": self.context.config.desktop.image_detail,
                    },
                },
            ],
        }

    def _guide_index_section(self) -> str:
        try:
            entries = self.context.guide_store.index()
        except (OSError, UnicodeDecodeError) as e:
            self._logger.warning("Guide index unavailable, omitting it: %s", e)
            return ""
        if not entries:
            return ""
        lines = "\n".join(f"- {entry.path}: {entry.title}" for entry in entries)
        return self.context.prompt_engine.render(
            "agent.system.guide_index.md", {"guide_entries": lines}
        )
