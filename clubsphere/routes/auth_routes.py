import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator

from clubsphere.auth import jwt_handler
from clubsphere.auth.dependencies import get_current_session, get_current_user, get_session_store, get_storage
from clubsphere.auth.passwords import hash_password, verify_password
from clubsphere.storage.base import ConflictError, Storage
from clubsphere.storage.records import NewUser, User, UserRole
from clubsphere.storage.sessions import Session, SessionStore

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8
SELF_REGISTRATION_ROLES = {UserRole.student, UserRole.leader}


class RegisterRequest(BaseModel):
    username: str
    password: str
    email: str
    full_name: str
    school_id: str
    role: UserRole = UserRole.student

    @field_validator('username', 'full_name', 'school_id')
    @classmethod
    def validate_required_text(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('This field is required.')
        return normalized

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        normalized = value.strip().lower()
        local_part, _, domain = normalized.partition('@')
        if not local_part or '.' not in domain:
            raise ValueError('A valid email address is required.')
        return normalized

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
        return value

    @field_validator('role')
    @classmethod
    def validate_role(cls, value: UserRole) -> UserRole:
        if value not in SELF_REGISTRATION_ROLES:
            raise ValueError('Admin accounts cannot be self-registered.')
        return value


class LoginRequest(BaseModel):
    username: str
    password: str

    @field_validator('username')
    @classmethod
    def validate_username(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Username is required.')
        return normalized


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: User


def issue_token(user: User, sessions: SessionStore) -> TokenResponse:
    session = sessions.create(user.id)
    token = jwt_handler.create_access_token(subject=user.id, session_id=session.session_id)
    return TokenResponse(access_token=token, user=user)


@router.post('/register', response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
):
    if storage.get_user_by_username(data.username):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Username already exists.')
    if storage.get_user_by_email(data.email):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail='Email already exists.')

    try:
        user = storage.create_user(
            NewUser(
                username=data.username,
                password=hash_password(data.password),
                email=data.email,
                full_name=data.full_name,
                school_id=data.school_id,
                role=data.role,
            )
        )
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc

    logger.info('Registered user %s as %s', user.id, user.role.value)
    return issue_token(user, sessions)


@router.post('/login', response_model=TokenResponse)
def login(
    data: LoginRequest,
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
):
    user = storage.get_user_by_username(data.username)
    if user is None or not verify_password(user.password, data.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid username or password.')
    return issue_token(user, sessions)


@router.post('/logout', status_code=status.HTTP_204_NO_CONTENT)
def logout(
    session: Session = Depends(get_current_session),
    sessions: SessionStore = Depends(get_session_store),
):
    sessions.delete(session.session_id)


@router.get('/me', response_model=User)
def me(current_user: User = Depends(get_current_user)):
    return current_user
