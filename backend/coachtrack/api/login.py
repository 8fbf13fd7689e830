from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from coachtrack.database import get_db
from coachtrack.crud import user as crud_user
from coachtrack.utils.utils import verify_password, create_access_token
from coachtrack.schemas.user import UserCreate, UserLogin, UserResponse, TokenResponse
from coachtrack.api.auth import get_current_user

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _token_response(user) -> TokenResponse:
    return TokenResponse(
        user=UserResponse.model_validate(user),
        token=create_access_token(user.id, user.role),
    )


@router.post("/signup", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def signup(user: UserCreate, db: Session = Depends(get_db)):
    db_user = crud_user.create_user(db, user)
    return _token_response(db_user)


@router.post("/login", response_model=TokenResponse)
def login(login_data: UserLogin, db: Session = Depends(get_db)):
    """
    JSON login; the returned token goes in the Authorization: Bearer header.
    """
    user = crud_user.get_user_by_email(db, email=login_data.email)
    if not user or not verify_password(login_data.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _token_response(user)


@router.get("/me", response_model=UserResponse)
def read_me(current_user=Depends(get_current_user)):
    return current_user
