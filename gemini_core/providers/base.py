"""Provider 抽象接口。

会话层 Conversation 不直接依赖 httpx，而是依赖此协议：

- 负责：把 GenerateContentRequest 发送到指定端点，并把响应 JSON 解析为
  GenerateContentResponse。
- 端点 URL（含 API key）由 Conversation 构造后传入，Provider 本身不持有凭据。

测试中可以用任何实现了 generate_content 的对象替代真实 HTTP 客户端。
"""

from typing import Protocol

from gemini_core.domain.models import GenerateContentRequest, GenerateContentResponse


class ProviderClient(Protocol):
    """generateContent 传输协议。

    实现者需要提供：
    - name: Provider 名称，用于日志。
    - generate_content(endpoint, req): 执行一次非流式调用。
    """

    name: str

    def generate_content(self, endpoint: str, req: GenerateContentRequest) -> GenerateContentResponse:
        ...
