from vault_assistant.context.assembler import ContextAssembler

__all__ = ["ContextAssembler"]
