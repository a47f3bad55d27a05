"""Provider 与模型配置。

集中记录 Gemini 的默认端点与已知模型，会话配置的默认值从这里读取，
便于后续升级默认模型或切换 API 版本。"""

from dataclasses import dataclass
from typing import Dict, Mapping


@dataclass
class ModelConfig:
    """单个模型的配置。"""

    name: str
    description: str


@dataclass
class ProviderConfig:
    """某个 Provider 的整体配置。"""

    name: str
    base_url: str
    default_model: str
    models: Dict[str, ModelConfig]


GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    default_model="gemini-1.5-flash",
    models={
        "gemini-1.5-flash": ModelConfig(
            name="gemini-1.5-flash",
            description="fast multimodal model",
        ),
        "gemini-1.5-pro": ModelConfig(
            name="gemini-1.5-pro",
            description="higher quality, slower",
        ),
    },
)


PROVIDER_REGISTRY: Mapping[str, ProviderConfig] = {
    "gemini": GEMINI_CONFIG,
}


def get_provider_config(name: str) -> ProviderConfig:
    """根据名称获取 ProviderConfig，名称不区分大小写。"""

    key = name.lower()
    for k, cfg in PROVIDER_REGISTRY.items():
        if k.lower() == key:
            return cfg
    raise KeyError(f"Unknown provider: {name!r}")
