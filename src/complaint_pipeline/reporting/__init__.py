from .report import save_audit, save_features

__all__ = ["save_audit", "save_features"]
