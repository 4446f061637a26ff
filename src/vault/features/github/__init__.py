from src.vault.features.github.handlers import router

__all__ = ["router"]
