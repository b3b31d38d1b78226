from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User, UserRole
from app.auth.security import verify_token
from app.services.subscription import evaluate_user

security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Dependency to get current authenticated user from JWT token"""
    payload = verify_token(credentials.credentials, expected_type="access")

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    return user


def require_role(*allowed_roles: UserRole):
    """Factory to create role-based access control dependency"""
    flat_roles = []
    for r in allowed_roles:
        if isinstance(r, (list, tuple)):
            flat_roles.extend(r)
        else:
            flat_roles.append(r)

    async def role_checker(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in flat_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {', '.join(r.value for r in flat_roles)}"
            )
        return current_user
    return role_checker


async def require_active_subscription(current_user: User = Depends(get_current_user)) -> User:
    """Gate for member content: only ACTIVE subscriptions (or admins) get through."""
    if current_user.role == UserRole.ADMIN:
        return current_user

    state = evaluate_user(current_user)
    if not state.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={
                "message": state.message,
                "status": state.status.value,
            },
        )
    return current_user


# Convenience dependencies for common role checks
require_admin = require_role(UserRole.ADMIN)
require_member = require_role(UserRole.MEMBER, UserRole.ADMIN)
