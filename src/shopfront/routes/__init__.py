from shopfront.routes.auth import auth_bp
from shopfront.routes.products import products_bp

__all__ = ["auth_bp", "products_bp"]
