import datetime
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin.auth import InvalidIdTokenError, ExpiredIdTokenError

import core.firebase as firebase
from core.config import settings
from services.finance_repository import FinanceRepository

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> dict:
    """
    Перевіряє Firebase ID Token (приходить як Bearer token).
    Без токена — 401, крім локальної розробки з ALLOW_LOCAL_DEV_USER.
    Прострочений/невірний токен — 401, щоб фронт оновив сесію.
    """
    if not creds or not creds.credentials:
        if settings.ALLOW_LOCAL_DEV_USER:
            return {"uid": settings.LOCAL_DEV_UID}
        raise _unauthorized("Not authenticated")

    if firebase.auth_client is None:
        firebase.initialize_firebase()
        if firebase.auth_client is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Firebase not initialized"
            )

    try:
        # Невеликий допуск по часу (макс 60 сек за Firebase SDK)
        return firebase.auth_client.verify_id_token(creds.credentials, clock_skew_seconds=60)
    except (ExpiredIdTokenError, InvalidIdTokenError) as e:
        logger.info(f"Token validation failed: {e}")
        raise _unauthorized("Token invalid or expired")
    except Exception as e:
        logger.warning(f"Token validation error: {e}")
        raise _unauthorized("Could not validate credentials")


def get_db():
    try:
        return firebase.ensure_initialized()
    except Exception as e:
        logger.exception(f"Firestore is unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage is temporarily unavailable"
        )


def get_repository(db=Depends(get_db)) -> FinanceRepository:
    return FinanceRepository(db)


def get_today() -> datetime.date:
    return datetime.date.today()
