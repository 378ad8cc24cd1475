from .user_model import User

__all__ = [
    "User",
]
