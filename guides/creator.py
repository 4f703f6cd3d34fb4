"""Turn free-form notes into a structured guide via the chat endpoint."""

from __future__ import annotations

import json
from datetime import date
from typing import TYPE_CHECKING

from agent.exceptions import GuideCreationError, GuidePathError
from guides.storage import title_from_text

if TYPE_CHECKING:
    from agent.agent_context import AgentContext


class GuideCreator:
    def __init__(self, context: "AgentContext"):
        self.context = context
        self.logger = context.logger("guide_creator", "guides.log")

    async def create(self, user_input: str) -> tuple[str, str]:
        """Ask the model for ``{folder, filename, content}``, save it, return ``(path, title)``."""
        self.context.require_api_key()
        if not user_input or not user_input.strip():
            raise GuideCreationError("Guide text is empty")

        system_prompt = self.context.prompt_engine.render(
            "agent.system.guide_create.md", {"today": date.today().isoformat()}
        )
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_input},
        ]
        response = await self.context.client.chat_completion(messages)
        if not response.content:
            raise GuideCreationError("Empty response")

        folder, filename, content = self.parse_reply(response.content)
        try:
            path = self.context.guide_store.save(f"{folder}/{filename}", content)
        except GuidePathError as e:
            raise GuideCreationError(str(e)) from e

        title = title_from_text(content) or filename
        self.logger.info("Created guide %s (%s)", path, title)
        return path, title

    @staticmethod
    def parse_reply(text: str) -> tuple[str, str, str]:
        """Extract the outermost JSON object from the reply."""
        start = text.find("{")
        end = text.rfind("}")
        if start == -1 or end <= start:
            raise GuideCreationError("Invalid response format")
        try:
            parsed = json.loads(text[start:end + 1])
        except json.JSONDecodeError as e:
            raise GuideCreationError(f"Failed to parse response: {e}") from e
        if not isinstance(parsed, dict):
            raise GuideCreationError("Invalid response format")

        fields = []
        for key in ("folder", "filename", "content"):
            value = parsed.get(key)
            if not isinstance(value, str) or not value.strip():
                raise GuideCreationError(f"Missing {key}")
            fields.append(value)
        folder, filename, content = fields
        return folder.strip().strip("/"), filename.strip(), content
