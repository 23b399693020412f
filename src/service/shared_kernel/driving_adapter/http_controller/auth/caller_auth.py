"""
Caller identity from the upstream auth proxy

The proxy authenticates the session and forwards the result as headers; this
service never looks identities up itself.
"""

from typing import Annotated, Optional

from fastapi import Depends, Header

from src.platform.exception.exceptions import AuthenticationError, ForbiddenError
from src.service.shared_kernel.domain.value_object.caller import Caller, CallerRole


async def get_current_caller(
    x_user_id: Annotated[Optional[str], Header()] = None,
    x_user_role: Annotated[Optional[str], Header()] = None,
    x_user_name: Annotated[Optional[str], Header()] = None,
) -> Caller:
    if not x_user_id or not x_user_id.strip():
        raise AuthenticationError('Authentication required')
    return Caller(
        identity=x_user_id.strip(),
        role=(x_user_role or CallerRole.USER).strip().lower(),
        name=(x_user_name or '').strip(),
    )


async def require_admin(caller: Caller = Depends(get_current_caller)) -> Caller:
    if not caller.is_admin:
        raise ForbiddenError('Admin role required')
    return caller
