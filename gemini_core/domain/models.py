"""Gemini generateContent 的请求/响应数据模型。

本模块定义了会话层与 Provider 之间共享的标准数据结构：

- Part: 消息内容的最小单元（目前只承载纯文本）。
- Content: 一轮对话（若干 Part + 角色）。
- Candidate: 模型返回的一个候选回答。
- GenerateContentRequest: 发给 generateContent 端点的完整请求。
- GenerateContentResponse: 解析后的响应，只读取第一个候选。

所有结构都带有 extra 字段：未识别的线上字段原样保存在这里，
Provider 在序列化时再原样写回，保证新增可选字段不会破坏现有调用方。
具体的 camelCase JSON 转换由 providers.gemini_client 负责。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from gemini_core.domain.exceptions import NoCandidatesError


# Gemini 对话角色（system 只用于 systemInstruction）
Role = Literal["user", "model", "system"]


@dataclass
class Part:
    """消息内容单元。

    - text: 纯文本内容；非文本 Part（inlineData、functionCall 等）为 None。
    - extra: 未识别的字段，例如 inlineData / functionCall，不做任何解释。
    """

    text: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Content:
    """一轮对话：有序的 Part 列表 + 角色标签。"""

    parts: List[Part]
    role: Role

    @classmethod
    def from_text(cls, role: Role, text: str) -> "Content":
        return cls(parts=[Part(text=text)], role=role)

    @property
    def text(self) -> Optional[str]:
        """第一个 Part 的文本，没有 Part 时为 None。"""

        if not self.parts:
            return None
        return self.parts[0].text


@dataclass
class Candidate:
    """单个候选回答（只使用第一个）。"""

    content: Content
    # finishReason / safetyRatings / citationMetadata / index 等
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerateContentRequest:
    """一次 generateContent 请求。

    contents 为整段历史的快照；system_instruction 为可选的常驻指令。
    extra 中可放 tools、safetySettings、generationConfig 等可选字段，
    会被合并进请求体，但本项目不解释其语义。
    """

    model: str
    contents: List[Content]
    system_instruction: Optional[Content] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass
class GenerateContentResponse:
    """generateContent 响应。

    - candidates: 候选回答列表。
    - model_version: 服务端返回的模型版本号。
    - extra: promptFeedback、usageMetadata 等未解析字段。
    - raw: 原始响应 JSON，用于调试或日志记录。
    """

    candidates: List[Candidate]
    model_version: str = ""
    extra: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[dict] = None

    def get_text(self) -> str:
        """返回第一个候选的第一个 Part 的文本。

        后续候选与多 Part 候选都不会被读取。

        Raises:
            NoCandidatesError: 没有候选、首个候选没有 Part，或该 Part 不含文本。
        """

        if not self.candidates:
            raise NoCandidatesError(code="NO_CANDIDATES", message="response contains no candidates")
        content = self.candidates[0].content
        if not content.parts:
            raise NoCandidatesError(code="NO_CANDIDATES", message="first candidate contains no parts")
        text = content.parts[0].text
        if text is None:
            raise NoCandidatesError(code="NO_CANDIDATES", message="first part carries no text")
        return text
