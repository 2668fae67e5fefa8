"""Shared route dependencies."""

from fastapi import Depends, Request

from barangay_api.security.config import SecurityConfig
from barangay_api.security.errors import IPAccessDenied
from barangay_api.services.client_ip_service import ClientIPExtractor, is_ip_whitelisted
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)


def get_security_config(request: Request) -> SecurityConfig:
    """Return the SecurityConfig the app was built with."""
    config: SecurityConfig = request.app.state.security_config
    return config


def get_ip_extractor(request: Request) -> ClientIPExtractor:
    """Return the ClientIPExtractor the app was built with."""
    extractor: ClientIPExtractor = request.app.state.client_ip_extractor
    return extractor


def get_request_ip(
    request: Request, extractor: ClientIPExtractor = Depends(get_ip_extractor)
) -> str:
    return extractor.get_client_ip(request)


def require_admin_ip(
    request: Request,
    config: SecurityConfig = Depends(get_security_config),
    client_ip: str = Depends(get_request_ip),
) -> str:
    """Allow the request only from a whitelisted admin IP.

    Raises:
        IPAccessDenied: If the client IP is not on the admin whitelist.
    """
    allowed = is_ip_whitelisted(
        client_ip,
        config.ip.admin_whitelist,
        allow_when_empty=config.ip.allow_all_when_whitelist_empty,
    )
    if not allowed:
        logger.warning(f"Admin access denied: ip={client_ip}, path={request.url.path}")
        raise IPAccessDenied()
    return client_ip
