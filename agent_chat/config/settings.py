"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。
这些值相当于宿主组件 Inspector 中已经解析好的设置（endpoint、方法、
请求头、回复字段、流式模式），解码管线只消费，不再校验其业务含义。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Literal, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("AGENT_CHAT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class ChatSettings(BaseSettings):
    """聊天 endpoint 配置（使用 Pydantic）。"""

    # ---- Endpoint 相关配置 ----
    endpoint_url: Optional[str] = Field(default=None, description="聊天 endpoint 地址，为空时禁止发送")
    request_method: Literal["POST", "GET"] = Field(default="POST", description="HTTP 方法")
    request_headers: Dict[str, str] = Field(
        default_factory=dict,
        description="额外请求头，会覆盖默认的 Content-Type",
    )
    response_key: str = Field(default="reply", description="非流式 JSON 响应中回复文本所在的字段")
    streaming_mode: Literal["none", "sse", "auto"] = Field(
        default="none",
        description="none: 一次性读取；sse/auto: 按响应类型流式解码",
    )

    # ---- 传输层 ----
    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    read_chunk_size: Optional[int] = Field(
        default=None,
        ge=1,
        description="流式读取的块大小（字节），为空时使用 httpx 默认值",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("request_method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("endpoint_url")
    @classmethod
    def strip_endpoint(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


settings = ChatSettings()

# 类型别名，让外部代码可以使用 Settings 类型
Settings = ChatSettings
