import hmac

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.config.settings import settings
from src.notifications import get_notification_service
from src.payments import get_payment_service
from src.rsvps.lifecycle import RSVPLifecycleController
from src.rsvps.repository.store import SqlRSVPStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_lifecycle_controller() -> RSVPLifecycleController:
    """Dependency to get the lifecycle controller. Override in tests."""
    return RSVPLifecycleController(
        store=SqlRSVPStore(),
        payment_service=get_payment_service(),
        notification_service=get_notification_service(),
        config=settings,
    )


def verify_admin_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> str:
    """Verify the admin bearer token."""
    expected = settings.admin_token
    if (
        credentials is None
        or not expected
        or not hmac.compare_digest(credentials.credentials.encode(), expected.encode())
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
