import logging
from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_db
from shared.core.exceptions import ForbiddenError, UnauthorizedError
from shared.core.permissions import has_permission, is_self_or_permitted
from shared.core.schemas import UserToken
from shared.models.users import User
from shared.utils.app_status_code import AppStatusCode

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def create_access_token(data: dict):
    payload = {key: str(value) if isinstance(value, UUID) else value for key, value in data.items()}

    expires = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires

    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def create_user_token(user: User) -> str:
    return create_access_token({
        "user_id": user.id,
        "org_id": user.org_id,
        "email": user.email,
        "role": user.role,
        "name": user.name,
    })


def verify_token(token: str) -> UserToken:
    """Decode a bearer token into its claims."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
        return UserToken(**payload)
    except ExpiredSignatureError:
        logger.warning("Rejected expired token")
        raise UnauthorizedError("Token has expired", AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED)
    except (JWTError, ValidationError):
        logger.warning("Rejected malformed token")
        raise UnauthorizedError("Invalid or expired token")


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing bearer token")

    user_data = verify_token(credentials.credentials)

    user = db.query(User).filter(
        User.id == user_data.user_id,
        User.org_id == user_data.org_id
    ).first()

    if not user:
        logger.warning("Token for unknown user %s", user_data.user_id)
        raise UnauthorizedError("User not found", AppStatusCode.AUTHENTICATION_USER_INVALID)

    if not user.is_active:
        logger.warning("Token for inactive user %s", user.id)
        raise UnauthorizedError("User is not active. Access denied",
                                AppStatusCode.AUTHENTICATION_USER_INACTIVE)

    # role changes take effect without re-login
    user_data.role = user.role
    user_data.name = user.name
    user_data.email = user.email
    return user_data


def validate_org_access(
    org_id: UUID,
    current_user: UserToken = Depends(validate_current_token)
) -> UserToken:
    if current_user.org_id != org_id:
        raise ForbiddenError("Access to this organization is not allowed",
                             AppStatusCode.ORGANIZATION_MISMATCH)
    return current_user


def require_permission(resource: str, action: str):
    def dependency(current_user: UserToken = Depends(validate_org_access)) -> UserToken:
        if not has_permission(current_user.role, resource, action):
            raise ForbiddenError(f"Insufficient permissions: {resource}:{action} required")
        return current_user

    return dependency


def require_self_or_permission(resource: str, action: str):
    def dependency(
        user_id: UUID,
        current_user: UserToken = Depends(validate_org_access)
    ) -> UserToken:
        if not is_self_or_permitted(current_user.user_id, user_id, current_user.role, resource, action):
            raise ForbiddenError(f"Insufficient permissions: {resource}:{action} required")
        return current_user

    return dependency
