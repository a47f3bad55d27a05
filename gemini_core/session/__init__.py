"""会话层：Conversation 及其配置。"""

from gemini_core.session.conversation import Conversation, ConversationConfig

__all__ = ["Conversation", "ConversationConfig"]
