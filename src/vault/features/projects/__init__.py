from src.vault.features.projects.handlers import router

__all__ = ["router"]
