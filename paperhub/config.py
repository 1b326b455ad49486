from typing import Literal

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./paperhub.db"
    ENV: str = "local"  # Environment setting
    LOG_LEVEL: str = "INFO"

    # Hosted chat endpoint (server side proxy to Ollama's OpenAI-compatible API)
    OLLAMA_BASE_URL: str = "http://localhost:11434"
    HOSTED_CHAT_MODEL: str = "qwen3:4b-instruct-2507-q4_K_M"

    # Chat client
    CHAT_BACKEND: Literal["hosted", "local", "worker"] = "hosted"
    HOSTED_CHAT_URL: str = "http://127.0.0.1:8000/api/chat"
    LOCAL_DAEMON_URL: str = "http://localhost:11434/api/chat"
    LOCAL_CHAT_MODEL: str = "qwen3:4b-instruct-2507-q4_K_M"

    # In-process model worker
    WORKER_MODEL_ID: str = "Qwen/Qwen2.5-0.5B-Instruct"
    WORKER_MAX_NEW_TOKENS: int = 1024
    WORKER_TEMPERATURE: float = 0.7

    # Comments / likes store and local state
    STORE_BASE_URL: str = "http://127.0.0.1:8000"
    STATE_FILE: str = "~/.paperhub/state.json"
    DEFAULT_NICKNAME: str = "Researcher"

    class Config:
        env_file = ".env"

settings = Settings()
