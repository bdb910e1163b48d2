from smart_minutes.routes.minutes import router as minutes_router

__all__ = ["minutes_router"]
