from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.orm import Session

from coachtrack.database import get_db
from coachtrack.exceptions import NotFoundError
from coachtrack.models.user import User, TRAINER_ROLES
from coachtrack.utils.utils import decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
):
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Session expired. Please re-login.",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception
    try:
        payload = decode_access_token(credentials.credentials)
        user_id = int(payload.get("sub"))
    except (JWTError, TypeError, ValueError):
        # Bad signature, expired, or missing/garbled subject
        raise credentials_exception

    # Check if user still exists in DB
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise credentials_exception

    return user


def require_trainer(current_user: User = Depends(get_current_user)):
    if current_user.role not in TRAINER_ROLES:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Trainer access required")
    return current_user


def resolve_client_id(client_ref: str, current_user: User, db: Session) -> int:
    """
    Map a {clientId|me} path segment to a client id the caller may read:
    the caller themself, or a client they train. Anything else is a 404.
    """
    if client_ref == "me":
        return current_user.id
    try:
        client_id = int(client_ref)
    except ValueError:
        raise NotFoundError("Client not found")

    if client_id == current_user.id:
        return client_id
    if current_user.role in TRAINER_ROLES:
        client = db.query(User.id).filter(User.id == client_id, User.trainer_id == current_user.id).first()
        if client is not None:
            return client_id
    raise NotFoundError("Client not found")
