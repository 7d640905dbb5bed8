import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.core.mail import send_mail
from ninja import Router, Schema

from .jwt_auth import create_access_token
from .mixed_auth import mixed_auth

logger = logging.getLogger(__name__)

router = Router()


class RegisterSchema(Schema):
    username: str
    email: str
    password: str
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""


class LoginSchema(Schema):
    username: str
    password: str


class ForgotPasswordSchema(Schema):
    email: str


class ResetPasswordSchema(Schema):
    token: str
    new_password: str


class TokenResponse(Schema):
    access_token: str
    token_type: str = "bearer"


class MessageResponse(Schema):
    message: str


class UserResponse(Schema):
    id: int
    username: str
    email: str
    first_name: str
    last_name: str


@router.post("/register", response={201: TokenResponse, 400: dict})
def register(request, data: RegisterSchema):
    """Register a new CRM user"""
    if User.objects.filter(username=data.username).exists():
        return 400, {"error": "Username already exists"}

    if User.objects.filter(email=data.email).exists():
        return 400, {"error": "Email already exists"}

    if len(data.password) < 8:
        return 400, {"error": "password: must be at least 8 characters"}

    # Django hashes the password with its configured hasher
    user = User.objects.create_user(
        username=data.username,
        email=data.email,
        password=data.password,
        first_name=data.first_name or "",
        last_name=data.last_name or "",
    )
    logger.info(f"Registered user {user.username}")

    token = create_access_token(user)
    return 201, {
        "access_token": token,
        "token_type": "bearer"
    }


@router.post("/login", response={200: TokenResponse, 401: dict})
def login(request, data: LoginSchema):
    """Login and get JWT token"""
    user = authenticate(username=data.username, password=data.password)

    if user is None:
        logger.warning(f"Failed login for {data.username}")
        return 401, {"error": "Invalid credentials"}

    token = create_access_token(user)
    return {
        "access_token": token,
        "token_type": "bearer"
    }


@router.get("/me", response=UserResponse, auth=mixed_auth)
def me(request):
    """Currently authenticated user"""
    return request.auth


@router.post("/forgot-password", response={200: MessageResponse, 404: dict})
def forgot_password(request, data: ForgotPasswordSchema):
    """Send password reset email"""
    user = User.objects.filter(email=data.email).first()
    if user is None:
        return 404, {"error": "User with this email does not exist"}

    now = datetime.now(timezone.utc)
    reset_payload = {
        'user_id': user.id,
        'email': user.email,
        'type': 'password_reset',
        'exp': now + timedelta(minutes=settings.JWT_PASSWORD_RESET_EXPIRE_MINUTES),
        'iat': now
    }
    reset_token = jwt.encode(reset_payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)

    reset_url = f"{settings.FRONTEND_URL}/reset-password?token={reset_token}"
    send_mail(
        subject='Password Reset Request',
        message=(
            f'Click the following link to reset your password: {reset_url}\n\n'
            f'This link will expire in {settings.JWT_PASSWORD_RESET_EXPIRE_MINUTES} minutes.'
        ),
        from_email=settings.DEFAULT_FROM_EMAIL,
        recipient_list=[user.email],
        fail_silently=False,
    )
    logger.info(f"Password reset email sent to user {user.id}")

    return {"message": "Password reset email sent"}


@router.post("/reset-password", response={200: MessageResponse, 400: dict})
def reset_password(request, data: ResetPasswordSchema):
    """Reset password using token"""
    try:
        payload = jwt.decode(
            data.token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except jwt.ExpiredSignatureError:
        return 400, {"error": "Reset token has expired"}
    except jwt.InvalidTokenError:
        return 400, {"error": "Invalid reset token"}

    if payload.get('type') != 'password_reset':
        return 400, {"error": "Invalid token type"}

    user = User.objects.filter(id=payload.get('user_id')).first()
    if user is None:
        return 400, {"error": "User not found"}

    user.set_password(data.new_password)
    user.save()
    logger.info(f"Password reset for user {user.id}")

    return {"message": "Password reset successfully"}
