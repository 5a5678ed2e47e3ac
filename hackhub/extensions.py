import bcrypt
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

db = SQLAlchemy()
migrate = Migrate()
csrf = CSRFProtect()

login_manager = LoginManager()

# Per client address; storage from RATELIMIT_STORAGE_URI.
limiter = Limiter(key_func=get_remote_address)

__all__ = ["db", "migrate", "csrf", "login_manager", "limiter", "bcrypt"]
