from .ollama import OllamaChat

__all__ = ["OllamaChat"]
