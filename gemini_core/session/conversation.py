"""会话核心模块。

Conversation 负责：维护线性的对话历史、构造 generateContent 请求、
解析响应并追加模型回复，以及把历史压缩成一条摘要。

一个 Conversation 同一时间只应有一个进行中的请求，内部不加锁。
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from gemini_core.config.settings import Settings
from gemini_core.domain.models import Content, GenerateContentRequest, GenerateContentResponse
from gemini_core.infrastructure.logging.logger import logger
from gemini_core.prompts import load_system_prompt
from gemini_core.providers import create_provider
from gemini_core.providers.base import ProviderClient
from gemini_core.providers.registry import GEMINI_CONFIG

SUMMARIZE_REQUEST = "Summarize the conversation"


@dataclass(frozen=True)
class ConversationConfig:
    """会话配置。

    - base_url: API 基础 URL，默认 https://generativelanguage.googleapis.com/v1beta。
    - model: 模型 ID，默认 gemini-1.5-flash。
    - http_timeout: 默认 HTTP 客户端的超时时间（秒）。
    """

    base_url: str = GEMINI_CONFIG.base_url
    model: str = GEMINI_CONFIG.default_model
    http_timeout: float = 30.0

    @classmethod
    def from_settings(cls, cfg: Settings) -> "ConversationConfig":
        return cls(
            base_url=cfg.gemini_base_url,
            model=cfg.default_model,
            http_timeout=cfg.http_timeout,
        )


class Conversation:
    """与 Gemini 的一段对话。

    - 持有 API key、会话配置、线性历史（从旧到新）与可选的系统指令。
    - 历史只由本对象修改：talk 成对追加 user/model，summarize 整体替换为一条摘要。
    - provider_client 为空时按 http_timeout 创建默认的 GeminiClient。
    """

    def __init__(
        self,
        api_key: str,
        config: Optional[ConversationConfig] = None,
        provider_client: Optional[ProviderClient] = None,
    ):
        self._api_key = api_key
        self._config = config or ConversationConfig()
        self._provider_client = provider_client or create_provider(timeout=self._config.http_timeout)
        self._history: List[Content] = []
        self._system_instruction: Optional[Content] = None

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def model(self) -> str:
        return self._config.model

    @property
    def config(self) -> ConversationConfig:
        return self._config

    @property
    def history(self) -> List[Content]:
        """历史副本（从旧到新），修改它不会影响会话本身。"""

        return copy.deepcopy(self._history)

    @property
    def system_instruction(self) -> Optional[Content]:
        return copy.deepcopy(self._system_instruction)

    def endpoint(self) -> str:
        base = self._config.base_url.rstrip("/")
        return f"{base}/models/{self._config.model}:generateContent?key={self._api_key}"

    def set_system_instruction(self, text: str) -> None:
        """替换当前的系统指令（不会追加，只保留最新一条）。"""

        self._system_instruction = Content.from_text("system", text)

    def talk(self, text: str) -> GenerateContentResponse:
        """发送一条用户消息并返回完整响应。

        成功时历史依次追加 user、model 两条记录；
        失败时会先移除本次追加的 user 记录再抛出异常，历史保持调用前的状态。

        Raises:
            RequestError: 网络、HTTP 状态或响应解码失败。
            NoCandidatesError: 响应中没有可用的候选文本。
        """

        self._history.append(Content.from_text("user", text))
        log_ctx: Dict[str, Any] = {"model": self._config.model, "turns": len(self._history)}
        self._log(logging.INFO, "conversation.talk.start", log_ctx)
        try:
            response = self._provider_client.generate_content(self.endpoint(), self._build_request())
            reply = response.get_text()
        except Exception as e:
            self._history.pop()
            self._log(logging.WARNING, "conversation.talk.failed", log_ctx, code=getattr(e, "code", type(e).__name__))
            raise
        self._history.append(Content.from_text("model", reply))
        self._log(logging.INFO, "conversation.talk.end", log_ctx, model_version=response.model_version)
        return response

    def summarize(self) -> None:
        """把整段历史压缩为一条 model 角色的摘要。

        在一个独立的临时会话上执行摘要请求（共享 API key、配置与传输层，
        历史为深拷贝），只有请求成功后才替换本会话的历史。
        """

        log_ctx: Dict[str, Any] = {"model": self._config.model, "turns": len(self._history)}
        self._log(logging.INFO, "conversation.summarize.start", log_ctx)
        scratch = self._spawn()
        scratch.set_system_instruction(load_system_prompt("summarize"))
        summary = scratch.talk(SUMMARIZE_REQUEST).get_text()

        self._history.clear()
        self._history.append(Content.from_text("model", summary))
        self._log(logging.INFO, "conversation.summarize.end", log_ctx, summary_chars=len(summary))

    def _spawn(self) -> "Conversation":
        scratch = Conversation(self._api_key, config=self._config, provider_client=self._provider_client)
        scratch._history = copy.deepcopy(self._history)
        return scratch

    def _build_request(self) -> GenerateContentRequest:
        return GenerateContentRequest(
            model=self._config.model,
            contents=copy.deepcopy(self._history),
            system_instruction=copy.deepcopy(self._system_instruction),
        )

    @staticmethod
    def _log(level: int, message: str, log_ctx: Dict[str, Any], **fields: Any) -> None:
        payload = dict(log_ctx)
        payload.update(fields)
        logger.log(level, message, extra={"extra": payload})
