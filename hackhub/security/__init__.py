"""Security package for HackHub."""

from .config import configure_secure_session, configure_security_headers, validate_input_length

__all__ = ['configure_secure_session', 'configure_security_headers', 'validate_input_length']
