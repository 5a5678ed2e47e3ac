"""Response headers, session cookie settings and request size guard."""

from flask import abort, request

# Uploaded screenshots are served from /static; the open-problem form lives off-site
# and is only ever opened in a new tab, never framed.
CONTENT_SECURITY_POLICY = {
    'default-src': "'self'",
    'script-src': "'self' 'unsafe-inline'",
    'style-src': "'self' 'unsafe-inline'",
    'img-src': "'self' data:",
    'connect-src': "'self'",
    'frame-ancestors': "'none'",
    'form-action': "'self'",
    'base-uri': "'self'",
}

STATIC_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'X-Frame-Options': 'DENY',
    'Referrer-Policy': 'same-origin',
}

SESSION_LIFETIME = 2 * 60 * 60

# Multipart boundaries and the other form fields ride along with the screenshot.
FORM_OVERHEAD = 1024 * 1024


def build_csp(policy=None) -> str:
    return "; ".join(f"{name} {value}" for name, value in (policy or CONTENT_SECURITY_POLICY).items())


def configure_security_headers(app):
    csp = build_csp()

    @app.after_request
    def add_security_headers(response):
        for name, value in STATIC_HEADERS.items():
            response.headers.setdefault(name, value)
        response.headers['Content-Security-Policy'] = csp
        if request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    return app


def configure_secure_session(app):
    """Cookies are HTTPS-only outside development; the login throttle lives in the session."""
    production = app.config.get('ENV') == 'production'
    app.config.update(
        PERMANENT_SESSION_LIFETIME=SESSION_LIFETIME,
        SESSION_COOKIE_SECURE=production,
        REMEMBER_COOKIE_SECURE=production,
        WTF_CSRF_SSL_STRICT=production,
    )
    return app


def validate_input_length(app):
    """Answer 413 for bodies bigger than one screenshot plus form fields."""

    @app.before_request
    def limit_request_size():
        limit = app.config.get('MAX_UPLOAD_SIZE', 5 * 1024 * 1024) + FORM_OVERHEAD
        if request.content_length and request.content_length > limit:
            abort(413)

    return app


__all__ = [
    'CONTENT_SECURITY_POLICY',
    'build_csp',
    'configure_security_headers',
    'configure_secure_session',
    'validate_input_length',
]
