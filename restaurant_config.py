import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

_ = load_dotenv(find_dotenv(), override=False)

BASE_DIR = Path(__file__).resolve().parent

# Groq exposes an OpenAI-compatible endpoint, so ChatOpenAI can talk to it directly.
DEFAULT_LLM_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_LLM_MODEL = "llama-3.1-8b-instant"


@dataclass
class Settings:
    data_dir: Path = BASE_DIR / "data"
    catalog_file: str = "sample_catalog.csv"
    schedule_file: str = "restaurant_schedule.csv"
    info_file: str = "restaurant_info.txt"
    order_log_path: Path = BASE_DIR / "orders.jsonl"
    log_file: Path = BASE_DIR / "restaurant_tools.log"
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    llm_api_key: str = ""
    llm_model: str = DEFAULT_LLM_MODEL
    llm_temperature: float = 0.2
    llm_max_tokens: int = 1024

    @property
    def catalog_path(self) -> Path:
        return self.data_dir / self.catalog_file

    @property
    def schedule_path(self) -> Path:
        return self.data_dir / self.schedule_file

    @property
    def info_path(self) -> Path:
        return self.data_dir / self.info_file

    @classmethod
    def from_env(cls) -> "Settings":
        defaults = cls()
        return cls(
            data_dir=Path(os.getenv("RESTAURANT_DATA_DIR") or defaults.data_dir).expanduser(),
            catalog_file=os.getenv("RESTAURANT_CATALOG_FILE") or defaults.catalog_file,
            schedule_file=os.getenv("RESTAURANT_SCHEDULE_FILE") or defaults.schedule_file,
            info_file=os.getenv("RESTAURANT_INFO_FILE") or defaults.info_file,
            order_log_path=Path(os.getenv("RESTAURANT_ORDER_LOG") or defaults.order_log_path).expanduser(),
            log_file=Path(os.getenv("RESTAURANT_LOG_FILE") or defaults.log_file).expanduser(),
            llm_base_url=os.getenv("LLM_BASE_URL") or defaults.llm_base_url,
            llm_api_key=os.getenv("LLM_API_KEY") or os.getenv("GROQ_API_KEY") or "",
            llm_model=os.getenv("LLM_MODEL") or defaults.llm_model,
            llm_temperature=float(os.getenv("LLM_TEMPERATURE") or defaults.llm_temperature),
            llm_max_tokens=int(os.getenv("LLM_MAX_TOKENS") or defaults.llm_max_tokens),
        )
