"""Challenge endpoints, including the day toggle."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from hundred_days.routers.dependencies import body_of, get_challenge_service
from hundred_days.schemas.challenge import ChallengeCreate, ChallengeUpdate
from hundred_days.schemas.envelope import envelope
from hundred_days.services.challenge_service import ChallengeService, parse_day
from hundred_days.services.queries import DEFAULT_SORT

router = APIRouter(prefix="/api/challenges", tags=["challenges"])


@router.get("", name="list_challenges")
async def list_challenges(
    status_filter: str | None = Query(None, alias="status"),
    author: str | None = Query(None),
    sort: str = Query(DEFAULT_SORT),
    service: ChallengeService = Depends(get_challenge_service),
) -> dict:
    """List challenges, optionally filtered by active/completed/paused."""
    challenges = await service.list_challenges(
        status=status_filter, author=author, sort=sort
    )
    return envelope([challenge.to_public() for challenge in challenges])


@router.get("/{challenge_id}", name="get_challenge")
async def get_challenge(
    challenge_id: str, service: ChallengeService = Depends(get_challenge_service)
) -> dict:
    challenge = await service.get_challenge(challenge_id)
    return envelope(challenge.to_public())


@router.post("", name="create_challenge", status_code=status.HTTP_201_CREATED)
async def create_challenge(
    payload: ChallengeCreate = Depends(body_of(ChallengeCreate)),
    service: ChallengeService = Depends(get_challenge_service),
) -> dict:
    challenge = await service.create_challenge(payload)
    return envelope(challenge.to_public(), message="Challenge created successfully")


@router.put("/{challenge_id}", name="update_challenge")
async def update_challenge(
    challenge_id: str,
    payload: ChallengeUpdate = Depends(body_of(ChallengeUpdate)),
    service: ChallengeService = Depends(get_challenge_service),
) -> dict:
    challenge = await service.update_challenge(challenge_id, payload)
    return envelope(challenge.to_public(), message="Challenge updated successfully")


@router.delete("/{challenge_id}", name="delete_challenge")
async def delete_challenge(
    challenge_id: str, service: ChallengeService = Depends(get_challenge_service)
) -> dict:
    challenge = await service.delete_challenge(challenge_id)
    return envelope(challenge.to_public(), message="Challenge deleted successfully")


@router.patch("/{challenge_id}/toggle-day/{day}", name="toggle_day")
async def toggle_day(
    challenge_id: str,
    day: str,
    service: ChallengeService = Depends(get_challenge_service),
) -> dict:
    """Flip completion of day ``day`` (1-100)."""
    day_number = parse_day(day)
    challenge = await service.toggle_day(challenge_id, day_number)
    return envelope(
        challenge.to_public(), message=f"Day {day_number} toggled successfully"
    )
