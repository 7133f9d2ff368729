from .analytics import Analytics, time_left

__all__ = ["Analytics", "time_left"]
