from fastapi import APIRouter, Depends

from petu.schemas.users import LoginOut, LoginRequest, RegisterOut, RegisterRequest
from petu.storage import EventStore, get_store

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/login", response_model=LoginOut)
def login(payload: LoginRequest, store: EventStore = Depends(get_store)):
    result = store.authenticate(payload.email, payload.password)
    return LoginOut(user=result.user, token=result.token)


@router.post("/register", response_model=RegisterOut)
def register(payload: RegisterRequest, store: EventStore = Depends(get_store)):
    user = store.register(payload.email, payload.password, payload.full_name)
    return RegisterOut(user=user)
