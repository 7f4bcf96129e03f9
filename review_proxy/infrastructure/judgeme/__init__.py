from .judgeme_client import JudgeMeClient

__all__ = ["JudgeMeClient"]
