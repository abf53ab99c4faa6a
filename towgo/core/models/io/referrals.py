"""
Referral program I/O models.
"""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ReferralReward(BaseModel):
    id: str
    title: str
    description: str
    threshold: int
    unlocked: bool


class ReferralSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    url: str
    referral_count: int = Field(alias="referralCount")
    total_invites: int = Field(alias="totalInvites")
    points: int
    rewards: List[ReferralReward]


class InviteRequest(BaseModel):
    count: int = Field(default=1, ge=1, le=100)


class RedeemRequest(BaseModel):
    code: str = Field(min_length=1, max_length=16)
