"""User registration route (/api/v1/auth)."""

from fastapi import APIRouter, Request, status

from .schemas import RegisterUserRequest, RegisterUserResponse, ErrorResponse

router = APIRouter()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=RegisterUserResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Login, email or password is not correct"},
        409: {"model": ErrorResponse, "description": "User with login or email already exists"},
    },
    summary="Register a new user",
    description="Registers a new user; authenticate afterwards with HTTP Basic (login or email).",
)
async def register_user(request: Request, body: RegisterUserRequest):
    auth_service = request.app.state.auth_service
    user = await auth_service.register(body.login, body.email, body.password)
    return RegisterUserResponse(
        id=user.id,
        login=user.login,
        email=user.email,
        created_at=user.created_at,
    )
