"""
Payment Endpoints.

Payment history of the signed-in user, Stripe checkout for catalog services
and payment status lookup for the checkout return page.
"""

from typing import List

from fastapi import APIRouter, status

from towgo.core.models.io.payments import CheckoutRequest, CheckoutSessionResponse, PaymentRead, PaymentStatusResponse
from towgo.server.services.deps import CurrentUser, PaymentRepositoryDep, PaymentServiceDep

router = APIRouter()


@router.get(
    "/payments",
    response_model=List[PaymentRead],
    summary="List Payments",
    description="Return the signed-in user's payments, newest first.",
    responses={401: {"description": "Not authenticated"}},
)
async def list_payments(user: CurrentUser, payments: PaymentRepositoryDep) -> List[PaymentRead]:
    return [PaymentRead.model_validate(p) for p in await payments.list_for_user(user.id)]


@router.get(
    "/payments/{payment_id}",
    response_model=PaymentRead,
    summary="Get Payment",
    description="Return one of the signed-in user's payments.",
    responses={403: {"description": "Payment belongs to another user"}, 404: {"description": "Payment not found"}},
)
async def get_payment(payment_id: int, user: CurrentUser, service: PaymentServiceDep) -> PaymentRead:
    return PaymentRead.model_validate(await service.get_for_user(payment_id, user))


@router.post(
    "/checkout",
    response_model=CheckoutSessionResponse,
    status_code=status.HTTP_200_OK,
    summary="Create Checkout Session",
    description="Open a Stripe checkout session for a catalog service.",
    response_description="The session id and the hosted checkout URL.",
    responses={
        404: {"description": "Service not found"},
        502: {"description": "Stripe request failed"},
        503: {"description": "Stripe not configured"},
    },
)
async def create_checkout(data: CheckoutRequest, user: CurrentUser, service: PaymentServiceDep) -> CheckoutSessionResponse:
    """
    Start a purchase.

    - **service_id**: Catalog service to buy
    - **success_url**: Where Stripe sends the buyer after paying
    - **cancel_url**: Where Stripe sends the buyer after cancelling
    """
    return await service.create_checkout(user, data.service_id, data.success_url, data.cancel_url)


@router.get(
    "/payment-status/{session_id}",
    response_model=PaymentStatusResponse,
    summary="Get Payment Status",
    description="Return the status of the payment recorded for a checkout session.",
    responses={404: {"description": "Payment not found"}},
)
async def payment_status(session_id: str, service: PaymentServiceDep) -> PaymentStatusResponse:
    return PaymentStatusResponse(status=await service.status_for_session(session_id))
