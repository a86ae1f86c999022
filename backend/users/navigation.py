# users/navigation.py
from config.constants import (
    HOME_ROUTE,
    DIRECTORY_ROUTE,
    DASHBOARD_ROUTE,
    LOGIN_ROUTE,
    PROTECTED_ROUTES,
)

LOGOUT_ENDPOINT = "/api/users/logout/"


def is_signed_in(user):
    return bool(user is not None and user.is_authenticated)


def build_navigation(user):
    """
    Build the persistent navigation for the current session state.
    Signed-in visitors get the dashboard, profile and sign-out entries;
    anonymous visitors get a sign-in link instead.
    """
    links = [
        {"key": "home", "label": "Home", "path": HOME_ROUTE},
        {"key": "businesses", "label": "Businesses", "path": DIRECTORY_ROUTE},
    ]

    if is_signed_in(user):
        links += [
            {"key": "dashboard", "label": "Dashboard", "path": DASHBOARD_ROUTE},
            {"key": "profile", "label": "Profile", "path": DASHBOARD_ROUTE},
            {"key": "logout", "label": "Sign out", "path": HOME_ROUTE, "action": LOGOUT_ENDPOINT},
        ]
    else:
        links.append({"key": "login", "label": "Sign in", "path": LOGIN_ROUTE})

    return links


def is_protected_route(path):
    path = (path or "").rstrip("/") or "/"
    return any(path == route or path.startswith(route + "/") for route in PROTECTED_ROUTES)


def resolve_route(path, user):
    """Return the route a visitor should be sent to instead of ``path``, or None."""
    if is_protected_route(path) and not is_signed_in(user):
        return LOGIN_ROUTE
    return None
