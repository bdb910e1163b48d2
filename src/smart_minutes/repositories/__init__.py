from smart_minutes.repositories.minutes_repository import MinutesRepository

__all__ = ["MinutesRepository"]
