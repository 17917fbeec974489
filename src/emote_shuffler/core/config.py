from __future__ import annotations

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_DIR = Path.home() / ".emote-shuffler"
CONFIG_PATH = CONFIG_DIR / "config.yaml"

DEFAULT_ENDPOINT = "https://7tv.io/v3/gql"
TOKEN_ENV = "SEVENTV_TOKEN"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class ShufflerConfig:
    endpoint: str = DEFAULT_ENDPOINT
    rate_per_minute: float = 100.0
    temp_name_length: int = 16
    request_timeout: int = 30
    log_dir: Path = CONFIG_DIR / "logs"
    log_level: str = "INFO"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["log_dir"] = str(self.log_dir)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ShufflerConfig":
        rate = float(data.get("rate_per_minute", 100.0))
        if rate <= 0:
            raise ValueError(f"rate_per_minute 必须为正数: {rate}")
        temp_name_length = int(data.get("temp_name_length", 16))
        if temp_name_length <= 0:
            raise ValueError(f"temp_name_length 必须为正数: {temp_name_length}")
        request_timeout = int(data.get("request_timeout", 30))
        if request_timeout <= 0:
            raise ValueError(f"request_timeout 必须为正数: {request_timeout}")
        log_level = str(data.get("log_level", "INFO")).upper()
        if log_level not in LOG_LEVELS:
            raise ValueError(f"未知的日志级别: {log_level}")
        return cls(
            endpoint=str(data.get("endpoint", DEFAULT_ENDPOINT)),
            rate_per_minute=rate,
            temp_name_length=temp_name_length,
            request_timeout=request_timeout,
            log_dir=Path(data.get("log_dir", CONFIG_DIR / "logs")),
            log_level=log_level,
        )


def read_token() -> Optional[str]:
    token = os.environ.get(TOKEN_ENV, "").strip()
    return token or None


class ConfigManager:
    def __init__(self, path: Path = CONFIG_PATH) -> None:
        self.path = path
        self._config = self._load()

    def _load(self) -> ShufflerConfig:
        if not self.path.exists():
            return ShufflerConfig()
        with self.path.open("r", encoding="utf-8") as fp:
            try:
                data = yaml.safe_load(fp) or {}
            except yaml.YAMLError as exc:
                raise ValueError(f"配置文件无法解析: {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"配置文件格式错误: {self.path}")
        return ShufflerConfig.from_dict(data)

    def get(self) -> ShufflerConfig:
        return self._config

    def save(self, config: Optional[ShufflerConfig] = None) -> None:
        if config is not None:
            self._config = config
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fp:
            yaml.safe_dump(self._config.to_dict(), fp, allow_unicode=True)
