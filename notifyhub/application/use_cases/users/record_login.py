"""Use case storing the time of a user's latest sign-in."""

from sqlalchemy.orm import Session

from notifyhub.infrastructure.repositories import UserRepository
from notifyhub.utils import now_in_app_timezone


def record_login(session: Session, user_id: str) -> None:
    repository = UserRepository(session)
    user = repository.get(user_id)
    if user is None:
        return
    user.last_login = now_in_app_timezone()
    repository.update(user)
