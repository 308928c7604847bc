from fastapi import Depends, Header, HTTPException, status

from marketplace.domain.schemas import UserContext, UserType


def get_current_user(
    x_user_id: str | None = Header(None),
    x_user_email: str | None = Header(None),
    x_user_type: str | None = Header(None),
) -> UserContext:
    """
    Session context as forwarded by the auth gateway in front of this service.
    Missing id means an anonymous request; the services decide what to refuse.
    """
    return UserContext(id=x_user_id or None, email=x_user_email, user_type=(x_user_type or "").lower() or None)


def require_role(role: UserType):
    """Dependency factory: 401 without a user, 403 for any other user type."""
    def _checker(user: UserContext = Depends(get_current_user)) -> UserContext:
        if not user.id:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        if user.user_type != role.value:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient privileges")
        return user
    return _checker


require_buyer = require_role(UserType.BUYER)
require_admin = require_role(UserType.ADMIN)
