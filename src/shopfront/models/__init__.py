# Re-export all models from a single entry point so the rest of the app
# can import cleanly:
#   from shopfront.models import User, AuthToken, Product

from shopfront.models.product import Product
from shopfront.models.user import AuthToken, User

__all__ = [
    "User",
    "AuthToken",
    "Product",
]
