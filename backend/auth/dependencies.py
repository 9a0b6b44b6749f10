from fastapi import Depends, Header, HTTPException, Request, status

from backend.auth.sessions import SessionStore


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.session_store


def get_session_token(authorization: str | None = Header(default=None)) -> str:
    token = (authorization or "").strip()
    if token[:7].lower() == "bearer ":
        token = token[7:].strip()
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    return token


def get_current_email(
    token: str = Depends(get_session_token),
    sessions: SessionStore = Depends(get_session_store),
) -> str:
    email = sessions.get(token)
    if email is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized.")
    return email
