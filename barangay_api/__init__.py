"""Barangay API Service.

Civic-services backend for barangay document requests, announcements and
resident feedback, fronted by a request sanitization and validation pipeline.
"""

__version__ = "1.0.0"
__service_name__ = "Barangay API"
__author__ = "Barangay Platform Team"
