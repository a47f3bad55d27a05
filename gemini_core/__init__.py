"""Gemini Core 顶层包。

该包提供 Gemini generateContent API 的最小会话客户端，
包括配置加载、请求/响应模型、HTTP Provider 适配、
会话历史维护与历史摘要压缩等能力。
"""

from gemini_core.session import Conversation, ConversationConfig

__all__ = ["Conversation", "ConversationConfig"]
