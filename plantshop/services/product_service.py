# plantshop/services/product_service.py
import logging

from fastapi import HTTPException, status

from plantshop.core.resource_client import ResourceClient, ResourceStoreError
from plantshop.models.product import Product
from plantshop.repositories.product_repo import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """
    Read-only access to the plant catalog.
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def list_products(self, client: ResourceClient) -> list[Product]:
        try:
            return self.repo.list(client)
        except ResourceStoreError:
            logger.exception("Catalog unavailable")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Catalog unavailable",
            )

    def get_product(self, client: ResourceClient, product_id: str) -> Product:
        try:
            product = self.repo.get_by_id(client, product_id)
        except ResourceStoreError:
            logger.exception("Could not load product %s", product_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Catalog unavailable",
            )
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product
