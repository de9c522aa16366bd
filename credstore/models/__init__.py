# Import every model so Base.metadata knows all entities before the store loads
from credstore.models.user import User, UserRole, UserStatus

__all__ = ["User", "UserRole", "UserStatus"]
