# plantshop/routers/checkout.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlmodel import Session

from plantshop.core.config import get_settings
from plantshop.core.resource_client import ResourceClient, get_resource_client
from plantshop.database import get_session
from plantshop.repositories.cart_repo import CartRepository
from plantshop.repositories.handoff_repo import HandoffRepository
from plantshop.repositories.order_repo import OrderRepository
from plantshop.repositories.product_repo import ProductRepository
from plantshop.schemas.checkout import CheckoutForm, CheckoutValidationRead
from plantshop.schemas.order import CheckoutResult, OrderRead
from plantshop.services.cart_service import CartService
from plantshop.services.checkout_validator import validate_checkout
from plantshop.services.order_service import OrderService

settings = get_settings()

router = APIRouter(tags=["Checkout"])

cart_repo = CartRepository()
product_repo = ProductRepository()
cart_service = CartService(cart_repo, product_repo)
service = OrderService(
    OrderRepository(),
    product_repo,
    cart_service,
    HandoffRepository(),
)


def confirmation_url(order_id: str) -> str:
    return f"{settings.API_V1_STR}/confirmation/{order_id}"


def payment_url(order_id: str) -> str:
    return f"{settings.API_V1_STR}/orders/{order_id}/payment"


@router.post("/checkout/validate", response_model=CheckoutValidationRead)
def validate_form(form: CheckoutForm):
    """
    Return the required/valid flags of every checkout field.

    Always 200: an invalid form is a normal answer here.
    """
    valid, state = validate_checkout(form)
    return state.to_read(valid)


@router.post(
    "/checkout",
    response_model=CheckoutResult,
    status_code=status.HTTP_201_CREATED,
    responses={
        202: {"model": CheckoutResult},
        422: {"model": CheckoutValidationRead},
    },
)
def checkout(
    form: CheckoutForm,
    client: ResourceClient = Depends(get_resource_client),
    session: Session = Depends(get_session),
):
    """
    Turn the cart into an order.

      - 422 with field flags if the form is invalid
      - 400 if the cart is empty
      - 202 with payment_url for card payments (order pending)
      - 201 with the confirmed order and a one-shot confirmation_url
    """
    valid, state = validate_checkout(form)
    if not valid:
        return JSONResponse(
            status_code=422,
            content=state.to_read(valid).model_dump(),
        )

    cart_lines = cart_service.list_cart(client)
    if not cart_lines:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cart is empty",
        )

    order = service.place_order(client, form, cart_lines)

    if order.status == "pending":
        result = CheckoutResult(
            outcome="payment_required",
            order_id=order.id,
            status=order.status,
            payment_url=payment_url(order.id),
        )
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=result.model_dump(),
        )

    service.finalize_order(client, session, order)
    return CheckoutResult(
        outcome="completed",
        order_id=order.id,
        status=order.status,
        order=service.build_order_read(order),
        confirmation_url=confirmation_url(order.id),
    )


@router.post("/orders/{order_id}/payment", response_model=CheckoutResult)
def complete_payment(
    order_id: str,
    client: ResourceClient = Depends(get_resource_client),
    session: Session = Depends(get_session),
):
    """
    Simulated card payment: confirm the pending order and empty the cart.
    """
    order = service.complete_card_payment(client, session, order_id)
    return CheckoutResult(
        outcome="completed",
        order_id=order.id,
        status=order.status,
        order=service.build_order_read(order),
        confirmation_url=confirmation_url(order.id),
    )


@router.get("/orders/{order_id}", response_model=OrderRead)
def get_order(
    order_id: str,
    client: ResourceClient = Depends(get_resource_client),
):
    """
    Get a stored order with derived totals.
    """
    order = service.order_repo.get_by_id(client, order_id)
    if order is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Order not found",
        )
    return service.build_order_read(order)
