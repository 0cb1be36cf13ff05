from expredit.editor.session import ReorderSession

__all__ = ["ReorderSession"]
