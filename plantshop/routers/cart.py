# plantshop/routers/cart.py
from fastapi import APIRouter, Depends

from plantshop.core.resource_client import ResourceClient, get_resource_client
from plantshop.repositories.cart_repo import CartRepository
from plantshop.repositories.product_repo import ProductRepository
from plantshop.schemas.cart import CartSummary, CartLineCreate, CartLineUpdate
from plantshop.services.cart_service import CartService
from plantshop.services.product_service import ProductService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
product_repo = ProductRepository()
service = CartService(cart_repo, product_repo)
product_service = ProductService(product_repo)


@router.get("", response_model=CartSummary)
def get_cart(client: ResourceClient = Depends(get_resource_client)):
    """
    Get the cart summary, priced from the current catalog.
    """
    return service.get_cart_summary(client)


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartLineCreate,
    client: ResourceClient = Depends(get_resource_client),
):
    """
    Add one unit of a product to the cart.

    Returns the updated cart summary.
    """
    product = product_service.get_product(client, payload.product_id)
    return service.add_to_cart(client, product.id, product.price, product.name)


@router.patch("/{line_id}", response_model=CartSummary)
def update_cart_line(
    line_id: str,
    payload: CartLineUpdate,
    client: ResourceClient = Depends(get_resource_client),
):
    """
    Set the quantity of a cart line (below 1 removes it).

    Returns the updated cart summary.
    """
    return service.update_quantity(client, line_id, payload.quantity)


@router.delete("/{line_id}", response_model=CartSummary)
def remove_cart_line(
    line_id: str,
    client: ResourceClient = Depends(get_resource_client),
):
    """
    Remove a line from the cart.

    Returns the updated cart summary.
    """
    return service.remove(client, line_id)


@router.delete("", response_model=CartSummary)
def clear_cart(client: ResourceClient = Depends(get_resource_client)):
    """
    Empty the cart.

    Returns the cart summary as re-read from the store.
    """
    service.clear_cart(client)
    return service.get_cart_summary(client)
