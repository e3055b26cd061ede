import logging

from fastapi import APIRouter, Depends, HTTPException, status

from company_api.core.errors import AuthFailedError, NotFoundError, TokenGenerationFailed
from company_api.deps import get_auth_service
from company_api.schemas.auth import LoginIn, TokenOut
from company_api.services.auth import AuthService

router = APIRouter(tags=["auth"])

logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, service: AuthService = Depends(get_auth_service)):
    try:
        token = service.authenticate(payload.email, payload.password)
    except NotFoundError:
        logger.warning("user not found email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="user not found")
    except AuthFailedError:
        logger.info("authentication failed email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials")
    except TokenGenerationFailed:
        logger.exception("token generation failed email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid credentials")
    except Exception:
        logger.exception("login failed email=%s", payload.email)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="failed to authenticate")

    logger.info("user authenticated email=%s", payload.email)
    return TokenOut(token=token)
