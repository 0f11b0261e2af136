"""Database models"""

from spark_rentals.models.user import User
from spark_rentals.models.session import RefreshSession

__all__ = ["User", "RefreshSession"]
