"""Interactive CLI for the desktop automation agent."""

from agent.agent import Agent
from agent.agent_context import AgentContext
from agent.config import AgentConfig
from agent.exceptions import ApiKeyMissingError, ReasoningClientError
from agent.response import AgentResult
from desktop.factory import create_desktop
from tools.guide_search import GUIDE_NOT_FOUND, search_guide


# ANSI color codes
RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"
CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
MAGENTA = "\033[35m"


class CLIApp:
    """Interactive REPL: one agent run per message."""

    def __init__(self, config: AgentConfig):
        self.config = config
        self.desktop = create_desktop(config.desktop)
        self.include_screen = True

    async def run(self):
        """Main REPL loop."""
        self._print_banner()

        while True:
            try:
                user_input = input(f"{BOLD}You:{RESET} ").strip()
            except (EOFError, KeyboardInterrupt):
                print(f"\n{DIM}Goodbye!{RESET}")
                break

            if not user_input:
                continue

            command = user_input.lower()
            if command in ("exit", "quit", "/exit", "/quit"):
                print(f"{DIM}Goodbye!{RESET}")
                break
            if command in ("help", "/help"):
                self._print_help()
                continue
            if command.startswith("/screen"):
                self._toggle_screen(user_input)
                continue
            if command == "/guides":
                self._list_guides()
                continue
            if command.startswith("/search"):
                parts = user_input.split(maxsplit=1)
                if len(parts) < 2:
                    print(f"{YELLOW}[Usage] /search <query>{RESET}")
                    continue
                await self._search(parts[1].strip())
                continue
            if command == "/test":
                await self._test_connection()
                continue

            print()
            try:
                result = await Agent(self._new_context()).run(
                    user_input, include_screen=self.include_screen
                )
            except (ApiKeyMissingError, ReasoningClientError) as e:
                print(f"{RED}[Error] {e}{RESET}\n")
                continue

            self._print_result(result)

    def _new_context(self) -> AgentContext:
        return AgentContext(self.config, desktop=self.desktop)

    def _print_result(self, result: AgentResult):
        for i, step in enumerate(result.steps, 1):
            if step.thought:
                print(f"{DIM}{step.thought}{RESET}")
            color = RED if step.result.startswith("Error:") else CYAN
            print(f"{color}[{i}] {step.action}{RESET} {DIM}{step.params}{RESET}")
            print(f"    {DIM}{step.result}{RESET}")

        color = GREEN if result.success else YELLOW
        print(f"\n{BOLD}{color}Agent:{RESET} {result.final_response}\n")

    def _toggle_screen(self, user_input: str):
        parts = user_input.split()
        if len(parts) != 2 or parts[1].lower() not in ("on", "off"):
            print(f"{YELLOW}[Usage] /screen on|off{RESET}")
            return
        self.include_screen = parts[1].lower() == "on"
        state = "on" if self.include_screen else "off"
        print(f"{DIM}[Screen capture {state}]{RESET}")

    def _list_guides(self):
        entries = self._new_context().guide_store.index()
        if not entries:
            print(f"{DIM}[No guides]{RESET}")
            return
        for entry in entries:
            print(f"{DIM}- {entry.path}: {entry.title}{RESET}")

    async def _search(self, query: str):
        try:
            result = await search_guide(query, self._new_context())
        except (ApiKeyMissingError, ReasoningClientError) as e:
            print(f"{RED}[Error] {e}{RESET}")
            return
        if result == GUIDE_NOT_FOUND:
            print(f"{YELLOW}[No matching guide]{RESET}")
        else:
            print(f"\n{result}\n")

    async def _test_connection(self):
        context = self._new_context()
        try:
            context.require_api_key()
            reply = await context.client.test_connection()
        except (ApiKeyMissingError, ReasoningClientError) as e:
            print(f"{RED}[Error] {e}{RESET}")
            return
        print(f"{GREEN}[Connected]{RESET} {DIM}{reply}{RESET}")

    def _print_banner(self):
        print(f"""
{BOLD}{CYAN}╔══════════════════════════════════════╗
║        Desktop Automate v0.1.0       ║
║   Screen-aware task automation agent ║
╚══════════════════════════════════════╝{RESET}
{DIM}Model: {self.config.api.model}
Endpoint: {self.config.api.endpoint}
Desktop backend: {self.desktop.name}{RESET}
""")

    def _print_help(self):
        print(f"""
{BOLD}Commands:{RESET}
  {CYAN}/screen{RESET} on|off — Attach a screenshot to each request
  {CYAN}/guides{RESET}  — List available guides
  {CYAN}/search{RESET} <query> — Search guides with the sub-agent
  {CYAN}/test{RESET}    — Test the API connection
  {CYAN}/help{RESET}    — Show this help
  {CYAN}/exit{RESET}    — Quit

{BOLD}How it works:{RESET}
  The agent looks at your screen, then moves the mouse, types and
  presses keys until the task is done or {self.config.max_iterations} rounds have passed.
""")
