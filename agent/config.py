"""Configuration loading and validation."""

import json
import os
from dataclasses import asdict, dataclass, field
from agent.exceptions import ConfigError


@dataclass
class ApiConfig:
    """Connection settings for the OpenAI-compatible chat endpoint."""
    endpoint: str = "https://api.openai.com/v1"
    api_key: str = ""
    model: str = "gpt-4o"
    supports_vision: bool = True
    max_tokens: int = 4096
    temperature: float = 0.7


@dataclass
class HttpSettings:
    """Transport timeouts for the chat endpoint."""
    connect_timeout: float = 10.0
    read_timeout: float = 120.0


@dataclass
class DesktopConfig:
    """Configuration for the desktop effector backend."""
    backend: str = "auto"  # "auto", "windows" or "unsupported"
    mouse_move_duration_ms: int = 300
    typing_delay_ms: int = 30
    ui_tree_depth: int = 2
    image_detail: str = "high"


@dataclass
class TelemetryConfig:
    """Configuration for telemetry and metrics logging."""
    enabled: bool = False
    log_dir: str = "./data/metrics"


@dataclass
class AgentConfig:
    """Complete agent configuration."""
    api: ApiConfig = field(default_factory=ApiConfig)
    http: HttpSettings = field(default_factory=HttpSettings)
    desktop: DesktopConfig = field(default_factory=DesktopConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    prompt_profile: str = "default"
    max_iterations: int = 20
    guide_search_max_iterations: int = 10
    guide_preview_lines: int = 10
    data_dir: str = "data"
    guides_dir: str = "data/guides"
    log_dir: str = "data/logs"


def load_config(config_path: str = "config.json") -> AgentConfig:
    """Load configuration from JSON file with defaults."""
    raw: dict = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            raise ConfigError(f"Failed to load config from {config_path}: {e}")
        if not isinstance(raw, dict):
            raise ConfigError(f"Config file {config_path} must contain a JSON object")

    data_dir = raw.get("data_dir", "data")
    if not isinstance(data_dir, str) or not data_dir.strip():
        raise ConfigError("data_dir must be a non-empty string")

    api = _load_api_settings(raw.get("api") or {})
    env_key = os.getenv("AUTOMATE_API_KEY")
    if env_key:
        api.api_key = env_key.strip()
    env_endpoint = os.getenv("AUTOMATE_API_ENDPOINT")
    if env_endpoint:
        api.endpoint = env_endpoint.strip()

    http = _load_http_settings(raw.get("http") or {})
    desktop = _load_desktop_settings(raw.get("desktop") or {})
    telemetry = _load_telemetry_settings(raw.get("telemetry") or {}, data_dir)

    prompt_profile = raw.get("prompt_profile", "default")
    if not isinstance(prompt_profile, str) or not prompt_profile.strip():
        raise ConfigError("prompt_profile must be a non-empty string")

    guides_dir = raw.get("guides_dir", os.path.join(data_dir, "guides"))
    log_dir = raw.get("log_dir", os.path.join(data_dir, "logs"))

    for d in [data_dir, guides_dir, log_dir]:
        os.makedirs(d, exist_ok=True)

    return AgentConfig(
        api=api,
        http=http,
        desktop=desktop,
        telemetry=telemetry,
        prompt_profile=prompt_profile.strip(),
        max_iterations=_coerce_int(raw.get("max_iterations", 20), "max_iterations", 1),
        guide_search_max_iterations=_coerce_int(
            raw.get("guide_search_max_iterations", 10),
            "guide_search_max_iterations",
            1,
        ),
        guide_preview_lines=_coerce_int(
            raw.get("guide_preview_lines", 10), "guide_preview_lines", 1
        ),
        data_dir=data_dir,
        guides_dir=guides_dir,
        log_dir=log_dir,
    )


def save_config(config: AgentConfig, config_path: str = "config.json") -> None:
    """Write configuration to a JSON file."""
    directory = os.path.dirname(config_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    try:
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(asdict(config), f, indent=2)
    except IOError as e:
        raise ConfigError(f"Failed to save config to {config_path}: {e}")


def _load_api_settings(raw: dict) -> ApiConfig:
    """Parse and validate endpoint settings."""
    if not isinstance(raw, dict):
        raise ConfigError("api must be an object")

    endpoint = raw.get("endpoint", "https://api.openai.com/v1")
    if not isinstance(endpoint, str) or not endpoint.strip():
        raise ConfigError("api.endpoint must be a non-empty string")

    api_key = raw.get("api_key", "")
    if not isinstance(api_key, str):
        raise ConfigError("api.api_key must be a string")

    model = raw.get("model", "gpt-4o")
    if not isinstance(model, str) or not model.strip():
        raise ConfigError("api.model must be a non-empty string")

    supports_vision = raw.get("supports_vision", True)
    if not isinstance(supports_vision, bool):
        raise ConfigError("api.supports_vision must be a boolean")

    return ApiConfig(
        endpoint=endpoint.strip(),
        api_key=api_key.strip(),
        model=model.strip(),
        supports_vision=supports_vision,
        max_tokens=_coerce_int(raw.get("max_tokens", 4096), "api.max_tokens", 1),
        temperature=_coerce_float(raw.get("temperature", 0.7), "api.temperature", 0.0),
    )


def _load_http_settings(raw: dict) -> HttpSettings:
    """Parse and validate transport timeouts."""
    if not isinstance(raw, dict):
        raise ConfigError("http must be an object")
    return HttpSettings(
        connect_timeout=_coerce_float(raw.get("connect_timeout", 10.0), "http.connect_timeout", 0.1),
        read_timeout=_coerce_float(raw.get("read_timeout", 120.0), "http.read_timeout", 0.1),
    )


def _load_desktop_settings(raw: dict) -> DesktopConfig:
    """Parse and validate desktop backend settings."""
    if not isinstance(raw, dict):
        raise ConfigError("desktop must be an object")

    backend = raw.get("backend", "auto")
    if backend not in ("auto", "windows", "unsupported"):
        raise ConfigError("desktop.backend must be 'auto', 'windows', or 'unsupported'")

    image_detail = raw.get("image_detail", "high")
    if image_detail not in ("low", "high", "auto"):
        raise ConfigError("desktop.image_detail must be 'low', 'high', or 'auto'")

    return DesktopConfig(
        backend=backend,
        mouse_move_duration_ms=_coerce_int(
            raw.get("mouse_move_duration_ms", 300), "desktop.mouse_move_duration_ms", 0
        ),
        typing_delay_ms=_coerce_int(raw.get("typing_delay_ms", 30), "desktop.typing_delay_ms", 0),
        ui_tree_depth=_coerce_int(raw.get("ui_tree_depth", 2), "desktop.ui_tree_depth", 0),
        image_detail=image_detail,
    )


def _load_telemetry_settings(raw: dict, data_dir: str) -> TelemetryConfig:
    """Parse and validate telemetry settings."""
    if not isinstance(raw, dict):
        raise ConfigError("telemetry must be an object")

    enabled = raw.get("enabled", False)
    if not isinstance(enabled, bool):
        raise ConfigError("telemetry.enabled must be a boolean")

    log_dir = raw.get("log_dir", os.path.join(data_dir, "metrics"))
    if not isinstance(log_dir, str) or not log_dir.strip():
        raise ConfigError("telemetry.log_dir must be a non-empty string")

    return TelemetryConfig(enabled=enabled, log_dir=log_dir)


def _coerce_float(value: object, name: str, min_value: float) -> float:
    """Coerce config value to float with basic validation."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a number")
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number")

    if value < min_value:
        raise ConfigError(f"{name} must be >= {min_value}")
    return value


def _coerce_int(value: object, name: str, min_value: int) -> int:
    """Coerce config value to int with basic validation."""
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be an integer")
    try:
        value = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an integer")

    if value < min_value:
        raise ConfigError(f"{name} must be >= {min_value}")
    return value
