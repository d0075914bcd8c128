from vault_assistant.agents.session import ConversationSession

__all__ = ["ConversationSession"]
