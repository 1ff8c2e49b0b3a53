from fastapi import Header, HTTPException, Request, status
from sqlalchemy.orm import Session


def get_db(request: Request):
    db: Session = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_user_team(
    x_user_team: str | None = Header(default=None, alias="x-user-team"),
) -> str:
    if not x_user_team or not x_user_team.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="x-user-team header is required")
    return x_user_team.strip()
