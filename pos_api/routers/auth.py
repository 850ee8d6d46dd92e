from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.exc import SQLAlchemyError
import logging

from pos_api.database import get_db
from pos_api.models.users import User, ROLE_ADMIN
from pos_api.schemas.user import UserCreate, UserResponse
from pos_api.core.auth import get_current_user, get_optional_user, get_admin_user
from pos_api.core.hashing import hash_password, verify_password
from pos_api.core.jwt import create_operator_token
from pos_api.core.rate_limiter import limiter

router = APIRouter(tags=["Authentication"])

logger = logging.getLogger("pos_api")


# ---------------- REGISTER ----------------
@router.post("/auth/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("3/minute")
def register(
    request: Request,
    user_data: UserCreate,
    db: Session = Depends(get_db),
    current_user=Depends(get_optional_user),
):
    # Only an admin may hand out the admin role
    if user_data.role == ROLE_ADMIN and (current_user is None or current_user.role != ROLE_ADMIN):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can create admin accounts",
        )

    if db.query(User).filter(User.username == user_data.username).first():
        raise HTTPException(status_code=409, detail="Username already exists")

    try:
        user = User(
            username=user_data.username,
            password_hash=hash_password(user_data.password),
            role=user_data.role,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    except SQLAlchemyError:
        db.rollback()
        raise HTTPException(status_code=500, detail="Unable to create account")

    logger.info(f"User {user.username} registered with role {user.role}")
    return user


# ---------------- LOGIN (TOKEN-BASED) ----------------
@router.post("/auth/login")
@limiter.limit("5/minute")
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db),
):
    user = db.query(User).filter(User.username == form_data.username).first()

    if not user or not verify_password(form_data.password, user.password_hash):
        logger.warning(f"Failed login for {form_data.username}")
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_operator_token(user)

    return {
        "access_token": token,
        "token_type": "bearer",
        "user": {"id": user.id, "username": user.username, "role": user.role},
    }


# ---------------- PROFILE ----------------
@router.get("/users/profile", response_model=UserResponse)
def profile(current_user=Depends(get_current_user)):
    return current_user


# ---------------- LIST USERS (ADMIN) ----------------
@router.get("/users", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    return db.query(User).order_by(User.id).all()
