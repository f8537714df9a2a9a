from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from storefront.data.database import get_db
from storefront.domain.errors import StorefrontError
from storefront.services.user_service import UserService
from storefront.domain.schemas import UserCredentials, UserRead

router = APIRouter(prefix="/api/users", tags=["users"])

@router.post("/signup", response_model=UserRead, status_code=201)
def signup(payload: UserCredentials, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.signup(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))

@router.post("/login", response_model=UserRead)
def login(payload: UserCredentials, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        return service.login(payload)
    except StorefrontError as e:
        raise HTTPException(status_code=e.status_code, detail=str(e))
