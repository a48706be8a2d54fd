from fastapi import APIRouter, HTTPException, Depends, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session, select

from expense_tracker.models.user import User
from expense_tracker.schemas.user import ChangePasswordRequest, UserCreate, UserRead
from expense_tracker.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user,
)
from expense_tracker.database import get_session
from expense_tracker.store import RecordStore
from expense_tracker.utils.category_helpers import create_base_categories

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register(user_create: UserCreate, session: Session = Depends(get_session)):
    user_exists = session.exec(select(User).where(User.email == user_create.email)).first()
    if user_exists:
        raise HTTPException(status_code=400, detail="Email already registered")

    if len(user_create.password) < 6:
        raise HTTPException(status_code=400, detail="Password must be at least 6 characters")

    user = User(email=user_create.email, hashed_password=get_password_hash(user_create.password))
    session.add(user)
    session.commit()
    session.refresh(user)

    create_base_categories(RecordStore(session, user.id))
    session.commit()
    return UserRead(id=user.id, email=user.email)


@router.post("/login")
def login(form_data: OAuth2PasswordRequestForm = Depends(), session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.email == form_data.username)).first()
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    access_token = create_access_token(data={"sub": str(user.id)})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me")
def read_users_me(user_id=Depends(get_current_user)):
    return {"user_id": user_id}


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user_id=Depends(get_current_user),
    session: Session = Depends(get_session),
):
    user = session.get(User, user_id)
    if not user or not verify_password(payload.current_password, user.hashed_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")
    user.hashed_password = get_password_hash(payload.new_password)
    session.add(user)
    session.commit()
    return {"detail": "Password updated"}
