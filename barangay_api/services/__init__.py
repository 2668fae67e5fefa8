"""Services package for the Barangay API.

Author: Barangay Platform Team
Version: 1.0.0
"""

from barangay_api.services.client_ip_service import (
    ClientIPExtractor,
    is_ip_blocked,
    is_ip_whitelisted,
)

__all__ = ["ClientIPExtractor", "is_ip_blocked", "is_ip_whitelisted"]
