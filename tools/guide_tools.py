"""Read-only tools over the guide corpus, used by the guide search sub-agent."""

from agent.exceptions import GuideNotFoundError, GuidePathError
from agent.response import ToolResult
from guides.storage import format_listing
from tools.base_tool import Tool

_FILE_PATH = {
    "type": "string",
    "description": "Path to the guide file (e.g., 'websites/youtube-upload.md')",
}


class GuideListTool(Tool):
    name = "guide_ls"
    description = "List guides in a directory. Omit path for root."
    parameters = {
        "type": "object",
        "properties": {
            "path": {
                "type": "string",
                "description": "Directory path (e.g., 'websites/'). Empty for root.",
            },
        },
        "required": [],
    }

    async def execute(self, args, context) -> ToolResult:
        path = args.get("path") or None
        try:
            entries = context.guide_store.list(path)
        except GuidePathError as e:
            return ToolResult.fail(str(e))
        return ToolResult.ok(format_listing(entries))


class GuidePreviewTool(Tool):
    name = "guide_preview"
    description = "Preview the first lines of a guide file."
    parameters = {
        "type": "object",
        "properties": {"file_path": dict(_FILE_PATH)},
        "required": ["file_path"],
    }

    async def execute(self, args, context) -> ToolResult:
        try:
            return ToolResult.ok(context.guide_store.preview(args["file_path"]))
        except (GuideNotFoundError, GuidePathError) as e:
            return ToolResult.fail(str(e))


class GuideReadTool(Tool):
    name = "guide_read"
    description = "Read full content of a guide file."
    parameters = {
        "type": "object",
        "properties": {"file_path": dict(_FILE_PATH)},
        "required": ["file_path"],
    }

    async def execute(self, args, context) -> ToolResult:
        try:
            return ToolResult.ok(context.guide_store.read(args["file_path"]))
        except (GuideNotFoundError, GuidePathError) as e:
            return ToolResult.fail(str(e))
