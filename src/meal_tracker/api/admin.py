"""Admin API endpoints with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status

from meal_tracker.api.models import MemberPayload  # noqa: TC001

if TYPE_CHECKING:
    from meal_tracker.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/centres/{centre_id}/members", dependencies=[Depends(require_admin)])
async def list_members(centre_id: str, request: Request) -> dict[str, object]:
    """Return every member of a centre, including roles."""
    container: AppContainer = request.app.state.container
    return {"members": container.centre_service.list_members(centre_id)}


@router.post(
    "/centres/{centre_id}/members",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def add_member(
    centre_id: str, payload: MemberPayload, request: Request
) -> dict[str, object]:
    """Create a centre member."""
    container: AppContainer = request.app.state.container
    member = container.centre_service.add_member(
        centre_id, payload.model_dump(exclude_none=True, mode="json")
    )
    return {"member": member}


@router.patch(
    "/centres/{centre_id}/members/{member_id}", dependencies=[Depends(require_admin)]
)
async def update_member(
    centre_id: str, member_id: str, payload: MemberPayload, request: Request
) -> dict[str, object]:
    """Update only the supplied member fields."""
    container: AppContainer = request.app.state.container
    member = container.centre_service.update_member(
        centre_id, member_id, payload.model_dump(exclude_unset=True, mode="json")
    )
    return {"member": member}


@router.delete(
    "/centres/{centre_id}/members/{member_id}",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def remove_member(centre_id: str, member_id: str, request: Request) -> Response:
    """Remove a member from a centre."""
    container: AppContainer = request.app.state.container
    container.centre_service.remove_member(centre_id, member_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
