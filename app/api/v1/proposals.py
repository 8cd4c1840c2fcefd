"""Proposals endpoint (protected): paginated listing."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.v1.auth import get_current_claims
from app.schemas.auth import CurrentClaims
from app.schemas.proposals import ProposalListResponse
from app.services.proposals import list_proposals

router = APIRouter()


@router.get("", response_model=ProposalListResponse)
def get_proposals(
    _claims: Annotated[CurrentClaims, Depends(get_current_claims)],
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> ProposalListResponse:
    """List proposals for the authenticated user, one page at a time."""
    return ProposalListResponse(data=list_proposals(page, limit))
