from src.vault.features.auth.handlers import router

__all__ = ["router"]
