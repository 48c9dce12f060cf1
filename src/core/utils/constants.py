"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

import os
from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"
ERROR_CODE_THUMBNAIL_REQUIRED = "THUMBNAIL_REQUIRED"
ERROR_CODE_INVALID_PROJECT_ID = "INVALID_PROJECT_ID"

# Auth Errors
ERROR_CODE_UNAUTHORIZED = "UNAUTHORIZED"

# Not Found Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"

# Storage Errors
ERROR_CODE_S3 = "S3_ERROR"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"

# Document / DynamoDB Errors
ERROR_CODE_DYNAMODB = "DYNAMODB_ERROR"
ERROR_CODE_PROJECT_CREATE_FAILED = "PROJECT_CREATE_FAILED"
ERROR_CODE_PROJECT_FETCH_FAILED = "PROJECT_FETCH_FAILED"
ERROR_CODE_PROJECT_UPDATE_FAILED = "PROJECT_UPDATE_FAILED"
ERROR_CODE_PROJECT_DELETE_FAILED = "PROJECT_DELETE_FAILED"
ERROR_CODE_PROJECT_LIST_FAILED = "PROJECT_LIST_FAILED"
ERROR_CODE_CONTACT_CREATE_FAILED = "CONTACT_CREATE_FAILED"

# Notification Errors
ERROR_CODE_NOTIFICATION_FAILED = "NOTIFICATION_FAILED"


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB in bytes
MAX_ADDITIONAL_IMAGES = 10


MIME_TYPE_EXTENSION_MAP: Final[dict[str, tuple[str, ...]]] = {
    "image/jpeg": ("jpg", "jpeg"),
    "image/png": ("png",),
    "image/gif": ("gif",),
    "image/webp": ("webp",),
}

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(MIME_TYPE_EXTENSION_MAP.keys())


# ============================================================================
# Object Store Layout
# ============================================================================

PROJECT_IMAGE_FOLDER = "portfolio-projects"
GENERAL_UPLOAD_FOLDER = "portfolio-general-uploads"
IMAGE_ID_PREFIX = "img_"

# API Gateway stops waiting for the integration after this many seconds
GATEWAY_TIMEOUT = 29

# Bounds for store operations (seconds). A single call, retries included,
# finishes within STORE_CALL_TIMEOUT; a concurrent batch shares one deadline.
STORE_CONNECT_TIMEOUT = 2
STORE_READ_TIMEOUT = 5
STORE_MAX_ATTEMPTS = 2
STORE_CALL_TIMEOUT = 15
STORE_MAX_WORKERS = 4


# ============================================================================
# Project Constraints
# ============================================================================

PROJECT_ID_PREFIX = "proj_"
PROJECT_ID_PATTERN = r"^proj_[0-9a-f]{32}$"
PROJECT_CATEGORIES: Final[tuple[str, ...]] = ("web", "mobile", "ui-ux", "game", "other")
TITLE_MIN_LENGTH = 3
TITLE_MAX_LENGTH = 100
DESCRIPTION_MIN_LENGTH = 10
GITHUB_LINK_PATTERN = r"^https?://(www\.)?github\.com/[a-zA-Z0-9_-]+/[a-zA-Z0-9_-]+(/.*)?$"
LIVE_LINK_PATTERN = r"^https?://[^\s$.?#].[^\s]*$"
FORM_TRUE_VALUE = "true"


# ============================================================================
# Legacy Image Repair
# ============================================================================

FALLBACK_ID_MARKER = "fallback"
PLACEHOLDER_THUMBNAIL_URL = "https://via.placeholder.com/150x100?text=Placeholder+Thumb"
PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/150x100?text=Placeholder+Image"


# ============================================================================
# Contact Form Constraints
# ============================================================================

CONTACT_NAME_MAX_LENGTH = 100
CONTACT_SUBJECT_MAX_LENGTH = 200
CONTACT_MESSAGE_MAX_LENGTH = 1000
EMAIL_PATTERN = r"^.+@.+\..+$"
CONTACT_MESSAGE_ID_PREFIX = "msg_"


# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"
API_KEY_HEADER = "x-api-key"
METRICS_NAMESPACE = os.getenv("POWERTOOLS_METRICS_NAMESPACE", "Portfolio")

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_IMAGE_PUBLIC_BASE_URL = "IMAGE_PUBLIC_BASE_URL"
ENV_PROJECTS_TABLE_NAME = "PROJECTS_TABLE_NAME"
ENV_CONTACT_MESSAGES_TABLE_NAME = "CONTACT_MESSAGES_TABLE_NAME"
ENV_ADMIN_API_KEY = "ADMIN_API_KEY"
ENV_OWNER_EMAIL = "OWNER_EMAIL"
ENV_NOTIFICATION_SENDER_EMAIL = "NOTIFICATION_SENDER_EMAIL"
ENV_CORS_ALLOWED_ORIGIN = "CORS_ALLOWED_ORIGIN"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)


def format_file_size(size_bytes: int) -> str:
    """Format file size in human-readable format.

    Args:
        size_bytes: Size in bytes

    Returns:
        Formatted file size string
    """
    size: float = float(size_bytes)

    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024.0:
            return f"{size:.1f} {unit}"
        size /= 1024.0

    return f"{size:.1f} TB"
