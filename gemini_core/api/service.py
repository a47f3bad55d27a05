"""对外 API 服务模块。

围绕一个进程级默认会话提供简化的函数接口供上层应用调用。
"""

from typing import Any, Dict, List, Optional

from gemini_core.config.settings import settings
from gemini_core.domain.exceptions import ValidationError
from gemini_core.infrastructure.logging.logger import logger
from gemini_core.session.conversation import Conversation, ConversationConfig


_conversation: Optional[Conversation] = None


def get_default_conversation() -> Conversation:
    """获取默认会话实例（单例），API key 取自配置 GEMINI_API_KEY。"""
    global _conversation
    if _conversation is None:
        api_key = getattr(settings, "gemini_api_key", None)
        if not api_key:
            raise ValidationError(code="MISSING_API_KEY", message="GEMINI_API_KEY not set")
        _conversation = Conversation(api_key, config=ConversationConfig.from_settings(settings))
    return _conversation


def reset_default_conversation() -> None:
    """丢弃默认会话，下次调用时按当前配置重新创建。"""
    global _conversation
    _conversation = None


def set_system_instruction(text: str) -> None:
    get_default_conversation().set_system_instruction(text)


def run_chat(user_input: str) -> Dict[str, Any]:
    """发送一条用户消息。

    Args:
        user_input: 用户输入内容

    Returns:
        包含模型回复、模型版本与当前历史长度的字典

    Raises:
        各种 domain.exceptions 中定义的异常
    """
    try:
        conv = get_default_conversation()
        response = conv.talk(user_input)
        return {
            "reply": response.get_text(),
            "model_version": response.model_version,
            "history_length": len(conv.history),
        }
    except Exception as e:
        logger.error(f"Chat failed: {e}", extra={"extra": {"error": type(e).__name__}})
        raise


def summarize_history() -> Dict[str, Any]:
    """压缩默认会话的历史，返回摘要文本与压缩后的历史长度。"""
    try:
        conv = get_default_conversation()
        conv.summarize()
        history = conv.history
        return {
            "summary": history[0].text if history else None,
            "history_length": len(history),
        }
    except Exception as e:
        logger.error(f"Summarize failed: {e}", extra={"extra": {"error": type(e).__name__}})
        raise


def get_history() -> List[Dict[str, Any]]:
    """获取默认会话的全部历史。

    Returns:
        按时间顺序排列的 {"role", "text"} 列表
    """
    conv = get_default_conversation()
    return [{"role": c.role, "text": c.text} for c in conv.history]
