# plantshop/routers/confirmation.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import RedirectResponse
from sqlmodel import Session

from plantshop.core.config import get_settings
from plantshop.database import get_session
from plantshop.repositories.handoff_repo import HandoffRepository
from plantshop.schemas.confirmation import ConfirmationRead
from plantshop.services.confirmation_service import ConfirmationService

settings = get_settings()

router = APIRouter(prefix="/confirmation", tags=["Confirmation"])

service = ConfirmationService(HandoffRepository())


@router.get(
    "/{order_id}",
    response_model=ConfirmationRead,
    responses={303: {"description": "Nothing to confirm, back to the catalog"}},
)
def get_confirmation(
    order_id: str,
    session: Session = Depends(get_session),
):
    """
    One-shot order confirmation.

    The first call consumes the handoff; later calls (or unknown orders)
    redirect to the catalog.
    """
    confirmation = service.build_confirmation(session, order_id)
    if confirmation is None:
        return RedirectResponse(
            url=f"{settings.API_V1_STR}/products",
            status_code=status.HTTP_303_SEE_OTHER,
        )
    return confirmation
