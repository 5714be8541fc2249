# Export all matching models for easy imports
from .base import Base
from .university import University
from .preferences import UserPreferences
from .saved_match import SavedMatch

__all__ = [
    "Base",
    "University",
    "UserPreferences",
    "SavedMatch",
]
