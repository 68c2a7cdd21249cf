"""User lookups and admin account management."""
from typing import Optional

from . import models


async def get_user_by_username(username: str) -> Optional[models.User]:
    """Retrieves a user by their username.

    Args:
        username: The username of the user to retrieve.

    Returns:
        The User object if found, otherwise None.
    """
    return await models.User.get_or_none(username=username)


async def get_user_by_email(email: str) -> Optional[models.User]:
    return await models.User.get_or_none(email=email)


async def create_admin_user(username: str, name: str, email: str, hashed_password: str) -> models.User:
    """Creates an active user holding the admin role.

    Returns:
        The newly created User object.
    """
    return await models.User.create(
        username=username,
        name=name,
        email=email,
        hashed_password=hashed_password,
        role="admin",
        is_active=True,
    )
