from fastapi import APIRouter, Depends

from .deps import get_auth_service
from ..application.services.auth_service import AuthService
from ..exceptions import create_success_response
from ..schemas import (
    APIResponse,
    ErrorResponse,
    LoginRequest,
    LoginVerifyRequest,
    LogoutRequest,
    RegisterRequest,
    VerifyOTPRequest,
)

router = APIRouter(
    prefix="/api/auth",
    tags=["Authentication"],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)


@router.post("/register", status_code=201, response_model=APIResponse)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user = service.register(
        full_name=body.full_name,
        national_id=body.national_id,
        phone=body.phone,
        email=body.email,
        address=body.address,
        role=body.role,
    )
    return create_success_response(user, "User registered successfully. Please verify the OTP.")


@router.post("/verify-otp", response_model=APIResponse)
def verify_otp(body: VerifyOTPRequest, service: AuthService = Depends(get_auth_service)):
    user = service.verify_registration(body.id, body.otp, body.password)
    return create_success_response(user, "User verified successfully")


@router.post("/login", response_model=APIResponse)
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = service.login(body.id, body.password)
    return create_success_response(result, "OTP sent for login verification")


@router.post("/login-verify", response_model=APIResponse)
def login_verify(body: LoginVerifyRequest, service: AuthService = Depends(get_auth_service)):
    user = service.verify_login(body.id, body.otp)
    return create_success_response(user, "Login successful")


@router.post("/logout", response_model=APIResponse)
def logout(body: LogoutRequest, service: AuthService = Depends(get_auth_service)):
    service.logout(body.id)
    return create_success_response(None, "Logged out successfully")
