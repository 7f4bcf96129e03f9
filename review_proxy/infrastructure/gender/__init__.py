from .gender_service import GenderCache, GenderService, InMemoryGenderCache

__all__ = ["GenderCache", "GenderService", "InMemoryGenderCache"]
