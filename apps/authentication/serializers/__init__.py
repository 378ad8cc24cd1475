from .user_serializer import (
    UserAdminUpdateSerializer,
    UserLoginSerializer,
    UserRegistrationSerializer,
    UserSerializer,
    UserStatsSerializer,
)

__all__ = [
    "UserRegistrationSerializer",
    "UserLoginSerializer",
    "UserSerializer",
    "UserAdminUpdateSerializer",
    "UserStatsSerializer",
]
