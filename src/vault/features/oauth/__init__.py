from src.vault.features.oauth.handlers import router

__all__ = ["router"]
