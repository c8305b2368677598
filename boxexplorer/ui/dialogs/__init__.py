from .ai_config_dialog import AiConfigDialog

__all__ = ["AiConfigDialog"]
