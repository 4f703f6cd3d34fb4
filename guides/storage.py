"""Guide storage: a two-level (category/entry) Markdown corpus on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from agent.exceptions import GuideNotFoundError, GuidePathError

DEFAULT_CATEGORIES = ("websites", "applications", "workflows")


@dataclass
class GuideEntry:
    """File or folder inside the guide root."""
    name: str
    path: str
    is_dir: bool


@dataclass
class GuideIndexEntry:
    """Depth-1 guide listed in the system prompt."""
    path: str
    title: str


class GuideStore:
    """Reads and writes guides under a fixed root directory."""

    def __init__(self, root: str, preview_lines: int = 10):
        self.root = Path(root).resolve()
        self.preview_lines = preview_lines
        self.root.mkdir(parents=True, exist_ok=True)
        if not any(self.root.iterdir()):
            for category in DEFAULT_CATEGORIES:
                (self.root / category).mkdir(exist_ok=True)

    def list(self, subpath: str | None = None) -> list[GuideEntry]:
        """List entries in a folder: directories first, then by name."""
        target = self._resolve(subpath) if subpath else self.root
        if not target.is_dir():
            return []

        entries: list[GuideEntry] = []
        for child in target.iterdir():
            if child.name.startswith("."):
                continue
            entries.append(
                GuideEntry(
                    name=child.name,
                    path=child.relative_to(self.root).as_posix(),
                    is_dir=child.is_dir(),
                )
            )
        entries.sort(key=lambda e: (not e.is_dir, e.name))
        return entries

    def preview(self, path: str, lines: int | None = None) -> str:
        """Return the first lines of a guide."""
        content = self.read(path)
        count = lines if lines is not None else self.preview_lines
        return "\n".join(content.splitlines()[:count])

    def read(self, path: str) -> str:
        file_path = self._existing_file(path)
        return file_path.read_text(encoding="utf-8")

    def save(self, path: str, content: str) -> str:
        """Write a guide, creating parent folders. Returns the relative path."""
        file_path = self._resolve(path)
        if file_path == self.root or file_path.is_dir():
            raise GuidePathError(f"Path is a directory: {path}")
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content, encoding="utf-8")
        return file_path.relative_to(self.root).as_posix()

    def index(self) -> list[GuideIndexEntry]:
        """List every ``<category>/<file>.md`` with its title, sorted by path."""
        index: list[GuideIndexEntry] = []
        for folder in self.root.iterdir():
            if folder.name.startswith(".") or not folder.is_dir():
                continue
            for file_path in folder.iterdir():
                if file_path.name.startswith(".") or not file_path.name.endswith(".md"):
                    continue
                if not file_path.is_file():
                    continue
                try:
                    title = extract_title(file_path)
                except (OSError, UnicodeDecodeError):
                    # unreadable guides stay out of the index
                    continue
                index.append(GuideIndexEntry(path=f"{folder.name}/{file_path.name}", title=title))
        index.sort(key=lambda e: e.path)
        return index

    def _existing_file(self, path: str) -> Path:
        file_path = self._resolve(path)
        if not file_path.exists():
            raise GuideNotFoundError(f"Guide not found: {path}")
        if file_path.is_dir():
            raise GuidePathError(f"Path is a directory: {path}")
        return file_path

    def _resolve(self, path: str) -> Path:
        """Resolve a guide-relative path, refusing anything outside the root."""
        relative = (path or "").strip().lstrip("/\\")
        resolved = (self.root / relative).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise GuidePathError(f"Path is outside the guide directory: {path}")
        return resolved


def extract_title(path: Path) -> str:
    """Title from frontmatter ``title:``, then the first ``# `` heading, then the file stem."""
    content = path.read_text(encoding="utf-8")
    title = title_from_text(content)
    return title or path.stem


def title_from_text(content: str) -> str | None:
    if content.startswith("---"):
        end = content.find("---", 3)
        if end != -1:
            for line in content[3:end].splitlines():
                if line.startswith("title:"):
                    return line[len("title:"):].strip().strip('"')

    for line in content.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return None


def format_listing(entries: list[GuideEntry]) -> str:
    """Render a folder listing for the model, folders suffixed with ``/``."""
    if not entries:
        return "(empty directory)"
    return "\n".join(f"{e.name}/" if e.is_dir else e.name for e in entries)
