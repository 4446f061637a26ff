"""Existence-then-ownership checks for nested resources."""

import logging
from typing import Any, Callable, TypeVar

from src.vault.exceptions import AuthorizationError, NotFoundError

logger = logging.getLogger(__name__)

T = TypeVar("T")


def require_ownership(
    resource_id: Any,
    lookup: Callable[[Any], T | None],
    owner_of: Callable[[T], Any],
    identity_id: Any,
    resource_name: str = "Resource",
) -> T:
    """
    Load a resource and make sure the caller owns it.

    Existence is checked before ownership, so a missing resource is a 404 and
    someone else's resource is a 403.

    Args:
        resource_id: ID of the resource to load
        lookup: Fetches the resource by ID, returning None if it does not exist
        owner_of: Extracts the owning user ID from the resource
        identity_id: User ID proven by the session token
        resource_name: Used in the 404 message

    Returns:
        The loaded resource

    Raises:
        NotFoundError: 404 if the resource does not exist
        AuthorizationError: 403 if the resource belongs to another user

    Example:
        >>> project = require_ownership(
        ...     project_id,
        ...     lambda pid: db.get_by_id("projects", pid, "id, user_id"),
        ...     lambda p: p["user_id"],
        ...     current_user.id,
        ...     resource_name="Project",
        ... )
    """
    resource = lookup(resource_id)
    if resource is None:
        raise NotFoundError(f"{resource_name} not found")

    if str(owner_of(resource)) != str(identity_id):
        logger.warning(
            f"User {identity_id} denied access to {resource_name.lower()} {resource_id}",
            extra={"resource": resource_name, "resource_id": str(resource_id)},
        )
        raise AuthorizationError()

    return resource
