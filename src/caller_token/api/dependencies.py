"""FastAPI dependencies for validating caller tokens on incoming requests.

Handlers declare ``caller: CurrentCaller`` (or ``UserCaller``) and receive the
decoded CallerInfo; requests without a valid token never reach them.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from caller_token.config import settings
from caller_token.domain.caller import CallerInfo
from caller_token.domain.services import CallerTokenService
from caller_token.logging_config import configure_logging, get_logger

logger = get_logger(__name__)


@lru_cache
def get_token_service() -> CallerTokenService:
    """Provide the process-wide token service built from settings.

    Logging is configured from the same settings on first use.
    """
    configure_logging(
        log_level=settings.log_level,
        format_as_json=settings.log_json,
        environment=settings.environment,
    )
    return CallerTokenService.from_settings(settings)


TokenServiceDep = Annotated[CallerTokenService, Depends(get_token_service)]


def get_caller_info(request: Request, service: TokenServiceDep) -> CallerInfo:
    """Resolve the caller from the token header.

    Returns:
        Decoded CallerInfo

    Raises:
        HTTPException: 401 if the header is missing, the token is invalid,
            or the caller has expired
    """
    token = request.headers.get(settings.header_name)
    if not token:
        logger.warning("caller_token_missing", header=settings.header_name)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"{settings.header_name} header is required",
        )

    caller = service.parse_token(token)
    if caller is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid caller token",
        )

    if settings.reject_expired and caller.is_expired():
        logger.info("caller_token_expired", appid=caller.appid, expire=caller.expire)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Caller token expired",
        )

    return caller


CurrentCaller = Annotated[CallerInfo, Depends(get_caller_info)]


def require_user(caller: CurrentCaller) -> CallerInfo:
    """Resolve the caller and reject device tokens.

    Raises:
        HTTPException: 403 if no user is bound to the token
    """
    if caller.is_device:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User token required",
        )
    return caller


UserCaller = Annotated[CallerInfo, Depends(require_user)]
