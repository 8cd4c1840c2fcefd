"""Proposal listing backed by static sample data until proposals are persisted."""

from datetime import datetime

from app.schemas.proposals import Proposal, ProposalPage

SAMPLE_PROPOSALS: tuple[Proposal, ...] = (
    Proposal(
        id="1",
        title="Orçamento Website Corporativo",
        client="Empresa ABC Ltda",
        total=15000.00,
        status="draft",
        created_at=datetime.fromisoformat("2025-09-20T10:00:00+00:00"),
        updated_at=datetime.fromisoformat("2025-09-22T14:30:00+00:00"),
    ),
    Proposal(
        id="2",
        title="Sistema E-commerce",
        client="Loja XYZ",
        total=25000.00,
        status="pending",
        created_at=datetime.fromisoformat("2025-09-18T08:15:00+00:00"),
        updated_at=datetime.fromisoformat("2025-09-23T09:45:00+00:00"),
    ),
)


def list_proposals(page: int, limit: int) -> ProposalPage:
    """Return one page of proposals; total counts all proposals, not just the page."""
    start = (page - 1) * limit
    items = list(SAMPLE_PROPOSALS[start : start + limit])
    return ProposalPage(proposals=items, total=len(SAMPLE_PROPOSALS), page=page, limit=limit)
