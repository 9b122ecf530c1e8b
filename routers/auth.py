# routers/auth.py
from fastapi import APIRouter, Depends

from dependencies import get_user_directory
from schemas import SignupRequest, SignupResponse, LoginRequest, LoginResponse, UserOut, ContactOut, MessageResponse
from services.user_directory import UserDirectory

router = APIRouter(tags=["Authentication"])

@router.post("/signup", response_model=SignupResponse, responses={400: {"model": MessageResponse}})
def signup(user: SignupRequest, directory: UserDirectory = Depends(get_user_directory)):
    """Register a new user"""
    db_user = directory.signup(
        mobile_number=user.mobile_number,
        name=user.name,
        email=user.email,
        password=user.password,
        mpin=user.mpin,
    )
    return {"message": "User created successfully", "user": UserOut.model_validate(db_user)}

@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": MessageResponse}, 404: {"model": MessageResponse}},
)
def login(credentials: LoginRequest, directory: UserDirectory = Depends(get_user_directory)):
    """Check the mpin and return the user with their contact list"""
    db_user, contacts = directory.login(credentials.mobile_number, credentials.mpin)
    return {
        "message": "Login successful",
        "user": ContactOut.model_validate(db_user),
        "contacts": [ContactOut.model_validate(contact) for contact in contacts],
    }
