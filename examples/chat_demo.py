"""Minimal demonstration of a Gemini conversation."""

from gemini_core.api.service import get_history, run_chat, set_system_instruction, summarize_history

if __name__ == "__main__":
    set_system_instruction("You are a concise assistant.")
    for question in ["What is a context window?", "Why does it matter for long chats?"]:
        result = run_chat(question)
        print("User:", question)
        print("Model:", result["reply"])
    print("Summary:", summarize_history()["summary"])
    print("History:", get_history())
