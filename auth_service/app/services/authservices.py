import logging
from uuid import UUID

from sqlalchemy.orm import Session

from shared.core import auth
from shared.core.exceptions import UnauthorizedError
from shared.helpers.datetime_helper import utcnow
from shared.models.users import User
from shared.utils.app_status_code import AppStatusCode

from ..schemas.authschemas import LoginRequest

logger = logging.getLogger(__name__)


def login(db: Session, req: LoginRequest) -> dict:
    query = db.query(User).filter(User.email == str(req.email))
    if req.org_id:
        query = query.filter(User.org_id == req.org_id)

    user = next(
        (candidate for candidate in query.order_by(User.created_at).all()
         if candidate.verify_password(req.password)),
        None
    )

    if not user:
        logger.warning("Failed login for %s", req.email)
        raise UnauthorizedError("Invalid email or password",
                                AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID)

    if not user.is_active:
        logger.warning("Login attempt for inactive user %s", user.id)
        raise UnauthorizedError("User is not active. Access denied",
                                AppStatusCode.AUTHENTICATION_USER_INACTIVE)

    user.last_login_at = utcnow()
    db.commit()
    db.refresh(user)

    return {
        "access_token": auth.create_user_token(user),
        "token_type": "bearer",
        "user": user,
        "organization": user.organization,
    }


def get_me(db: Session, user_id: UUID) -> dict:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UnauthorizedError("User not found", AppStatusCode.AUTHENTICATION_USER_INVALID)
    return {"user": user, "organization": user.organization}
