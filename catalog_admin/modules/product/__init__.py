"""Product module — product CRUD, attribute values and the activation gate."""

from catalog_admin.modules.product.service import ProductService

__all__ = ["ProductService"]
