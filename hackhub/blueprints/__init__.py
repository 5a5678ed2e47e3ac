from .applications import applications_bp
from .auth import auth_bp
from .problems import problems_bp
from .profile import profile_bp

__all__ = ['applications_bp', 'auth_bp', 'problems_bp', 'profile_bp']
