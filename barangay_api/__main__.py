"""Barangay API module entry point.

Allows running the service as a module: python -m barangay_api

Security:
    Configures Uvicorn with proxy header support for secure IP extraction.
    Only enable proxy_headers if running behind a trusted proxy/load balancer.

Author: Barangay Platform Team
Version: 1.0.0
"""

import uvicorn

from barangay_api.config.settings import settings
from barangay_api.main import app
from barangay_api.utils.logging import get_logger

logger = get_logger(__name__)

if __name__ == "__main__":
    forwarded_allow_ips = None
    if settings.enable_proxy_headers and settings.trusted_proxies:
        forwarded_allow_ips = settings.trusted_proxies
        logger.info(f"Proxy headers enabled with trusted proxies: {forwarded_allow_ips}")
    elif settings.enable_proxy_headers:
        # WARNING: Using '*' trusts ALL proxies - only for development!
        forwarded_allow_ips = "*"
        logger.warning(
            "Proxy headers enabled with forwarded_allow_ips='*'. "
            "This is INSECURE for production! Set TRUSTED_PROXIES in .env"
        )
    else:
        logger.info("Proxy headers disabled - using direct connection IPs only")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        proxy_headers=settings.enable_proxy_headers,
        forwarded_allow_ips=forwarded_allow_ips,
    )
