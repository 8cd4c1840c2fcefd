"""Schemas for the proposal listing."""

from datetime import datetime
from typing import Literal

from app.schemas.common import CamelModel

ProposalStatus = Literal["draft", "pending", "approved", "rejected"]


class Proposal(CamelModel):
    id: str
    title: str
    client: str
    total: float
    status: ProposalStatus
    created_at: datetime
    updated_at: datetime


class ProposalPage(CamelModel):
    proposals: list[Proposal]
    total: int
    page: int
    limit: int


class ProposalListResponse(CamelModel):
    success: bool = True
    message: str = "Proposals retrieved successfully"
    data: ProposalPage
