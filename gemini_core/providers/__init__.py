"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口 (base)。
- 维护 Provider 与模型配置 (registry)。
- 提供具体实现 (gemini_client)。
"""

from typing import Optional

from gemini_core.config.settings import settings
from gemini_core.domain.exceptions import ValidationError
from gemini_core.providers.base import ProviderClient
from gemini_core.providers.gemini_client import GeminiClient


def create_provider(name: Optional[str] = None, timeout: Optional[float] = None) -> ProviderClient:
    """根据名称创建 Provider 实例，超时默认取配置中的 http_timeout。"""

    provider_name = (name or "gemini").lower()
    if provider_name != "gemini":
        raise ValidationError(code="UNKNOWN_PROVIDER", message=f"Unknown provider: {name!r}")
    return GeminiClient(timeout=timeout or getattr(settings, "http_timeout", None))
