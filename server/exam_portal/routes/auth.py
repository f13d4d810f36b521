import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.database import get_db
from exam_portal.errors import AuthError, ValidationError
from exam_portal.models import User
from exam_portal.schemas import (
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    TokenResponse,
    normalize_email,
)
from exam_portal.services.security import (
    create_access_token,
    get_current_claims,
    hash_password,
    verify_password,
)

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _token_response(user: User) -> TokenResponse:
    return TokenResponse(
        token=create_access_token(user.email, user.role.value),
        email=user.email,
        role=user.role,
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    email = normalize_email(request.email)
    if db.query(User).filter(User.email == email).first():
        raise ValidationError("Email already registered")

    user = User(
        name=request.name,
        email=email,
        password_hash=hash_password(request.password),
        role=request.role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s as %s", user.email, user.role.value)
    return _token_response(user)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    email = normalize_email(request.email)
    user = db.query(User).filter(User.email == email).first()
    if user is None or not verify_password(request.password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthError("Invalid email or password")
    return _token_response(user)


@router.get("/profile", response_model=ProfileResponse)
async def profile(claims: dict = Depends(get_current_claims)):
    return ProfileResponse(email=claims["sub"], role=claims["role"])
