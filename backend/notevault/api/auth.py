from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from notevault.api import deps
from notevault.models.auth import LoginRequest, RegisterRequest, TokenResponse
from notevault.utils.hashing import hash_password, verify_password
from notevault.utils.jwt_auth import create_access_token

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(req: RegisterRequest):
    if deps.users.get(req.user_id) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")
    if deps.users.find_by_email(req.email) is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    hpw = hash_password(req.password)  # never store plaintext
    try:
        rec = deps.users.create(req.user_id, req.email, req.username, hpw)
    except FileExistsError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User exists")
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid user_id")
    return rec.public_dict()


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest):
    rec = deps.users.get(req.user_id)
    if rec is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if not verify_password(req.password, rec.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    token = create_access_token(subject=req.user_id)
    return TokenResponse(access_token=token)
