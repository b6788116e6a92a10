import os
import re
from pathlib import Path

from dotenv import load_dotenv

# Load .env files before reading environment variables
try:
    repo_root_env = Path(__file__).resolve().parents[2] / ".env"
    backend_env = Path(__file__).resolve().parents[1] / ".env"
    if repo_root_env.exists():
        load_dotenv(dotenv_path=repo_root_env, override=False)
    if backend_env.exists():
        load_dotenv(dotenv_path=backend_env, override=False)
except OSError:
    pass


def search_engine_id_from(value: str) -> str:
    """Accept either a bare engine id or a full `...?cx=<id>&...` URL."""
    if value and "cx=" in value:
        match = re.search(r"cx=([^&]+)", value)
        if match:
            return match.group(1)
    return value or ""


LLM_API_KEY = os.getenv("LLM_API_KEY") or os.getenv("MISTRAL_API_KEY", "")
LLM_BASE_URL = os.getenv("LLM_BASE_URL", "https://api.mistral.ai/v1")
LLM_MODEL = os.getenv("LLM_MODEL", "mistral-medium")
LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT_SECONDS", "25"))

GOOGLE_API_KEY = os.getenv("GOOGLE_API_KEY", "")
GOOGLE_SEARCH_ENGINE_ID = search_engine_id_from(os.getenv("GOOGLE_SEARCH_ENGINE_ID", ""))
GOOGLE_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"
SEARCH_TIMEOUT = float(os.getenv("SEARCH_TIMEOUT_SECONDS", "15"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
NLU_TABLES_PATH = os.getenv("NLU_TABLES_PATH", "")
