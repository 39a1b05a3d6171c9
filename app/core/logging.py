"""
Secure Logging Utility - HIPAA-Compliant
Structured logging for the health prediction service

SECURITY REQUIREMENTS:
- No patient identifiers beyond the numeric patient id in logs
- Structured JSON lines for audit trails
- Sanitized error messages
"""

import logging
import re
import sys
import json
from typing import Optional, Dict, Any
from datetime import datetime, timezone

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(sys.stdout)
    ]
)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    return logger


class SecureLogger:
    """
    Logging wrapper that strips contact details and credentials from messages
    that mention sensitive keywords
    """

    SENSITIVE_PATTERNS = [
        r'password',
        r'secret',
        r'token',
        r'api[_-]?key',
        r'authorization',
        r'bearer',
        r'email',
        r'ssn',
        r'date[_-]?of[_-]?birth',
        r'phi',
    ]

    EMAIL_RE = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
    IP_RE = re.compile(r'\b\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}\b')
    TOKEN_RE = re.compile(r'\b[A-Za-z0-9_-]{32,}\b')
    PATH_RE = re.compile(r'/[^\s]+/([^/\s]+)')

    @classmethod
    def sanitize_message(cls, message: str) -> str:
        """
        Sanitize log message to remove sensitive information

        Args:
            message: Original log message

        Returns:
            Sanitized log message
        """
        message = cls.EMAIL_RE.sub('[email]', message)
        message = cls.IP_RE.sub('[ip]', message)
        message = cls.TOKEN_RE.sub('[token]', message)
        message = cls.PATH_RE.sub(r'\1', message)

        # Keep the first line of multi-line messages only
        if '\n' in message:
            message = message.split('\n')[0] + ' [stack trace truncated]'

        return message

    @classmethod
    def should_sanitize(cls, message: str) -> bool:
        message_lower = message.lower()
        return any(re.search(pattern, message_lower) for pattern in cls.SENSITIVE_PATTERNS)

    @classmethod
    def log(cls, logger: logging.Logger, level: int, message: str, *args, **kwargs):
        if cls.should_sanitize(message) or cls.EMAIL_RE.search(message):
            logger.log(level, f"[SANITIZED] {cls.sanitize_message(message)}", *args, **kwargs)
        else:
            logger.log(level, message, *args, **kwargs)


def log_info(message: str, logger_name: Optional[str] = None, **kwargs):
    SecureLogger.log(get_logger(logger_name or __name__), logging.INFO, message, **kwargs)


def log_warning(message: str, logger_name: Optional[str] = None, **kwargs):
    SecureLogger.log(get_logger(logger_name or __name__), logging.WARNING, message, **kwargs)


def log_error(message: str, logger_name: Optional[str] = None, exc_info: bool = False, **kwargs):
    if exc_info:
        kwargs['exc_info'] = True
    SecureLogger.log(get_logger(logger_name or __name__), logging.ERROR, message, **kwargs)


def log_audit(event_type: str, patient_id: Optional[int], details: Dict[str, Any]) -> Dict[str, Any]:
    """
    Log audit event with structured data

    Args:
        event_type: Type of audit event
        patient_id: Patient the event concerns (if applicable)
        details: Additional event details

    Returns:
        The audit entry that was written
    """
    audit_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event_type": event_type,
        "patient_id": patient_id,
        "details": details
    }
    get_logger("audit").info(f"[AUDIT] {json.dumps(audit_entry, default=str)}")
    return audit_entry
