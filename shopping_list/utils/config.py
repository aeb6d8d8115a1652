"""Load and validate environment variables. Uses python-dotenv.

Only the LLM client, logging and the UI read configuration; the cart itself
takes none. Callers should use the accessor functions below rather than reading
`os.environ` directly.
"""

from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
import os


def _project_root() -> Path:
    """Resolve project root (the directory holding app.py)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True so .env values take precedence over existing env vars.
    """
    load_dotenv(_project_root() / ".env", override=True)


def get_required(key: str) -> str:
    """
    Get required env var. Raises if missing or empty.

    Raises:
        ValueError: If key is missing or empty after trimming.
    """
    load_config()
    val = os.getenv(key, "").strip()
    if not val:
        raise ValueError(
            f"Missing required environment variable: {key}. "
            "Set it in .env or export it."
        )
    return val


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def llm_provider() -> str:
    """Optional: LLM provider. Default grok (xAI). Use groq for Llama via Groq."""
    return get_optional("LLM_PROVIDER", "grok").lower().strip()


def llm_base_url() -> str:
    """Chat completions URL for the active LLM provider."""
    if llm_provider() == "groq":
        return "https://api.groq.com/openai/v1/chat/completions"
    return "https://api.x.ai/v1/chat/completions"


def llm_api_key() -> str:
    """API key for the active LLM provider."""
    if llm_provider() == "groq":
        return get_required("GROQ_API_KEY")
    return get_required("GROK_API_KEY")


def llm_model() -> str:
    """Model name for the active LLM provider."""
    if llm_provider() == "groq":
        return get_optional("GROQ_MODEL", "llama-3.3-70b-versatile")
    return get_optional("GROK_MODEL", "grok-4-1-fast")


def llm_max_tokens() -> int:
    """Optional: max tokens for LLM responses. Default 1000."""
    return get_optional_int("LLM_MAX_TOKENS", 1000)


def llm_timeout_seconds() -> int:
    """Optional: HTTP timeout for chat requests. Default 60."""
    return get_optional_int("LLM_TIMEOUT_SECONDS", 60)


def log_level() -> str:
    return get_optional("LOG_LEVEL", "INFO")


def log_file() -> Optional[Path]:
    """Optional: log file path. Relative paths resolve against the project root."""
    val = get_optional("LOG_FILE", "")
    if not val:
        return None
    path = Path(val)
    return path if path.is_absolute() else _project_root() / path


def project_root() -> Path:
    return _project_root()
