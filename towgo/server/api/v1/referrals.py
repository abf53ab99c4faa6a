"""
Referral Program Endpoints.
"""

from typing import Optional

from fastapi import APIRouter, status

from towgo.core.models.io.referrals import InviteRequest, RedeemRequest, ReferralSummary
from towgo.server.services.deps import CurrentUser, ReferralServiceDep

router = APIRouter()


@router.get(
    "",
    response_model=ReferralSummary,
    summary="Referral Summary",
    description="Return the signed-in user's referral code, link, points and rewards.",
)
async def get_referrals(user: CurrentUser, service: ReferralServiceDep) -> ReferralSummary:
    return await service.summary(user)


@router.post(
    "/invites",
    response_model=ReferralSummary,
    summary="Record Invites",
    description="Count invitations the user sent from the app; `count` defaults to 1.",
)
async def record_invites(
    user: CurrentUser, service: ReferralServiceDep, data: Optional[InviteRequest] = None
) -> ReferralSummary:
    data = data or InviteRequest()
    return await service.record_invites(user, data.count)


@router.post(
    "/redeem",
    response_model=ReferralSummary,
    status_code=status.HTTP_201_CREATED,
    summary="Redeem Referral Code",
    description="Record that the signed-in user was referred by the owner of a code.",
    response_description="The referrer's updated summary.",
    responses={
        400: {"description": "Own referral code"},
        404: {"description": "Referral code not found"},
        409: {"description": "Already referred"},
    },
)
async def redeem_code(data: RedeemRequest, user: CurrentUser, service: ReferralServiceDep) -> ReferralSummary:
    referrer = await service.redeem(user, data.code)
    return await service.summary(referrer)
