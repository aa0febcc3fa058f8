import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from clubsphere.auth import jwt_handler
from clubsphere.storage.base import Storage
from clubsphere.storage.records import User, UserRole
from clubsphere.storage.sessions import Session, SessionStore

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def resolve_session(token: str, sessions: SessionStore) -> Session:
    try:
        claims = jwt_handler.decode_access_token(token)
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    if not claims.user_id or not claims.session_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token subject")

    session = sessions.get(claims.session_id)
    if session is None or session.user_id != claims.user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Session expired")
    return session


def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    sessions: SessionStore = Depends(get_session_store),
) -> Session:
    return resolve_session(credentials.credentials, sessions)


def get_current_user(
    session: Session = Depends(get_current_session),
    storage: Storage = Depends(get_storage),
) -> User:
    user = storage.get_user(session.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_security),
    storage: Storage = Depends(get_storage),
    sessions: SessionStore = Depends(get_session_store),
) -> User | None:
    """Like get_current_user, but anonymous or stale tokens just yield None."""
    if credentials is None:
        return None
    try:
        session = resolve_session(credentials.credentials, sessions)
    except HTTPException:
        return None
    return storage.get_user(session.user_id)


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != UserRole.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return current_user
