"""Request-scoped dependencies: the acting user and their capabilities.

Authentication happens upstream; the gateway forwards the verified identity
in ``X-Actor-*`` headers.
"""

from fastapi import Header, HTTPException

from marketplace.access import Actor, Role
from marketplace.utils.logging import add_context


async def current_actor(
    x_actor_id: str = Header(default=""),
    x_actor_role: str = Header(default=""),
    x_store_id: str | None = Header(default=None),
    x_actor_name: str | None = Header(default=None),
    x_actor_email: str | None = Header(default=None),
) -> Actor:
    if not x_actor_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        role = Role(x_actor_role.strip().lower())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Unknown role: {x_actor_role!r}")

    add_context(actor_id=x_actor_id, actor_role=role.value)
    return Actor(
        id=x_actor_id,
        role=role,
        store_id=x_store_id or None,
        name=x_actor_name,
        email=x_actor_email,
    )