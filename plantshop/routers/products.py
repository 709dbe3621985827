# plantshop/routers/products.py
from fastapi import APIRouter, Depends

from plantshop.core.resource_client import ResourceClient, get_resource_client
from plantshop.models.product import Product
from plantshop.repositories.product_repo import ProductRepository
from plantshop.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

repo = ProductRepository()
service = ProductService(repo)


@router.get("", response_model=list[Product])
def list_products(client: ResourceClient = Depends(get_resource_client)):
    """
    List the plant catalog.
    """
    return service.list_products(client)


@router.get("/{product_id}", response_model=Product)
def get_product(
    product_id: str,
    client: ResourceClient = Depends(get_resource_client),
):
    """
    Get a single product by id.
    """
    return service.get_product(client, product_id)
