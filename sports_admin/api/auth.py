import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from sports_admin.api.deps import get_current_admin
from sports_admin.core.security import create_access_token, hash_password, verify_password
from sports_admin.db.session import get_db
from sports_admin.models.admin import Admin
from sports_admin.schemas.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileOut,
    ProfileUpdateRequest,
    RegisterRequest,
)
from sports_admin.services.storage import StorageImageError, StorageService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

storage_service = StorageService()


def _auth_response(admin: Admin) -> AuthResponse:
    return AuthResponse(
        id=admin.id,
        name=admin.name,
        email=admin.email,
        profile_picture_url=admin.profile_picture_url,
        token=create_access_token(admin.id),
    )


def _normalize_email(email: str) -> str:
    return email.strip().lower()


@router.post("/register", response_model=AuthResponse)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    email = _normalize_email(payload.email)
    if db.scalar(select(Admin).where(Admin.email == email)):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists")

    admin = Admin(name=payload.name, email=email, password_hash=hash_password(payload.password))
    db.add(admin)
    db.commit()
    db.refresh(admin)
    logger.info("Registered admin %s", admin.id)
    return _auth_response(admin)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    admin = db.scalar(select(Admin).where(Admin.email == _normalize_email(payload.email)))
    if not admin or not verify_password(payload.password, admin.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    return _auth_response(admin)


@router.get("/profile", response_model=ProfileOut)
def profile(admin: Admin = Depends(get_current_admin)):
    return admin


@router.put("/profile", response_model=AuthResponse)
def update_profile(
    payload: ProfileUpdateRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    if payload.email is not None:
        email = _normalize_email(payload.email)
        other = db.scalar(select(Admin).where(Admin.email == email, Admin.id != admin.id))
        if other:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email is already in use")
        admin.email = email
    if payload.name is not None:
        admin.name = payload.name
    if "profile_picture_url" in payload.model_fields_set:
        admin.profile_picture_url = payload.profile_picture_url

    db.add(admin)
    db.commit()
    db.refresh(admin)
    return _auth_response(admin)


@router.post("/profile/picture", response_model=ProfileOut)
async def upload_profile_picture(
    picture: UploadFile = File(...),
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    try:
        picture_url = await storage_service.save_profile_picture(picture, admin_id=admin.id)
    except StorageImageError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    admin.profile_picture_url = picture_url
    db.add(admin)
    db.commit()
    db.refresh(admin)
    return admin


@router.post("/changepassword", response_model=MessageResponse)
def change_password(
    payload: ChangePasswordRequest,
    db: Session = Depends(get_db),
    admin: Admin = Depends(get_current_admin),
):
    # 401 is reserved for token problems; clients log out on it.
    if not verify_password(payload.current_password, admin.password_hash):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid current password")

    admin.password_hash = hash_password(payload.new_password)
    db.add(admin)
    db.commit()
    return MessageResponse(message="Password updated successfully")
