"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取对应的提示词文本，
用于构造 role="system" 的 systemInstruction。
"""

from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


def load_system_prompt(name: str, locale: str = "en") -> str:
    """根据提示词名称和语言加载文本，例如 name="summarize"。"""

    fname = PROMPTS_DIR / locale / f"{name}_system.md"
    return fname.read_text(encoding="utf-8").strip()
