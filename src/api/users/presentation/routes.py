"""HTTP routes for the user resource."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from users.application.services import UserService
from users.application.value_objects import Caller
from users.dependencies.user import get_current_caller, get_user_service
from users.domain.value_objects import ViewContext
from users.ports.exceptions import UserAPIError
from users.presentation.models import DeletedUserResponse, UserMutationRequest

router = APIRouter(
    prefix="/users",
    tags=["users"],
)

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"description": "Invalid parameters"},
    401: {"description": "Authentication required"},
    403: {"description": "Caller lacks the required capability"},
    404: {"description": "User not found"},
    500: {"description": "Internal server error"},
}

# Query parameters interpreted by the routes rather than the user query
_RESERVED_QUERY_PARAMS = frozenset({"context", "page"})
_LIST_QUERY_PARAMS = frozenset({"include", "exclude"})


def _filter_from_query(request: Request) -> dict[str, Any]:
    """Collect the list filter from the query string.

    ``include`` and ``exclude`` may be repeated or comma separated; any
    other repeated parameter keeps its last value.
    """
    params = request.query_params
    filter: dict[str, Any] = {}
    for key in params.keys():
        if key in _RESERVED_QUERY_PARAMS:
            continue
        if key in _LIST_QUERY_PARAMS:
            filter[key] = ",".join(params.getlist(key))
        else:
            filter[key] = params.getlist(key)[-1]
    return filter


@router.get(
    "",
    summary="List users",
    description="List users ordered by username, one page at a time",
    responses=_ERROR_RESPONSES,
)
async def list_users(
    request: Request,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
    context: Annotated[ViewContext, Query()] = ViewContext.VIEW,
    page: Annotated[str, Query(description="1-indexed page number")] = "1",
) -> list[dict[str, Any]]:
    """List users visible to the caller.

    Any query parameter other than ``context`` and ``page`` (``search``,
    ``role``, ``orderby``, ``order``, ``number``, ``include``, ``exclude``)
    is passed through as a filter.
    """
    try:
        return await service.list_users(
            caller,
            filter=_filter_from_query(request),
            context=context,
            page=page,
        )

    except UserAPIError:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list users",
        )


@router.get("/{user_id}", responses=_ERROR_RESPONSES)
async def get_user(
    user_id: str,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
    context: Annotated[ViewContext, Query()] = ViewContext.VIEW,
) -> dict[str, Any]:
    """Get a single user.

    Args:
        user_id: Numeric user ID
        caller: Current authenticated caller
        service: User service
        context: ``view`` or ``edit``

    Returns:
        The user representation

    Raises:
        UserAPIError: 400 for an invalid id, 403 if the caller may not view
            the user, 404 if the user does not exist
        HTTPException: 500 for unexpected errors
    """
    try:
        return await service.get_user(caller, user_id, context=context)

    except UserAPIError:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get user",
        )


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    responses={**_ERROR_RESPONSES, 409: {"description": "Username or email taken"}},
)
async def create_user(
    body: UserMutationRequest,
    response: Response,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Create a user.

    Responds with 201 and a ``Location`` header naming the new resource.
    A body carrying an existing ``ID`` is rejected with ``user_exists``.
    """
    try:
        created = await service.create_user(caller, body.to_payload())

    except UserAPIError:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user",
        )

    response.headers["Location"] = created.location
    return created.representation


@router.api_route(
    "/{user_id}",
    methods=["PUT", "PATCH"],
    responses={**_ERROR_RESPONSES, 409: {"description": "Username or email taken"}},
)
async def update_user(
    user_id: str,
    body: UserMutationRequest,
    request: Request,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
) -> dict[str, Any]:
    """Update a user.

    Any ``ID`` in the body is ignored in favor of the path id. ``username``,
    ``password`` and ``email`` must be supplied on every update.
    """
    try:
        return await service.update_user(
            caller,
            user_id,
            body.to_payload(with_identity=False),
            headers=dict(request.headers),
        )

    except UserAPIError:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update user",
        )


@router.delete("/{user_id}", responses=_ERROR_RESPONSES)
async def delete_user(
    user_id: str,
    caller: Annotated[Caller, Depends(get_current_caller)],
    service: Annotated[UserService, Depends(get_user_service)],
    force: bool = False,
    reassign: str | None = None,
) -> DeletedUserResponse:
    """Delete a user.

    Args:
        user_id: Numeric user ID
        caller: Current authenticated caller
        service: User service
        force: Accepted for compatibility
        reassign: ID of the user that inherits the deleted user's content
    """
    try:
        result = await service.delete_user(
            caller, user_id, force=force, reassign=reassign
        )
        return DeletedUserResponse(**result)

    except UserAPIError:
        raise
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete user",
        )
