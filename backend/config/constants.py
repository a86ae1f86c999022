# config/constants.py

ADMIN_ROLE = "admin"
STUDENT_ROLE = "student"

ROLE_CHOICES = [
    {"key": ADMIN_ROLE, "label": "Administrator"},
    {"key": STUDENT_ROLE, "label": "Student"},
]
DEFAULT_ROLE = STUDENT_ROLE

# Industries offered by the business management form
INDUSTRY_CHOICES = [
    "Technology",
    "Food & Beverage",
    "Retail",
    "Services",
    "Other",
]

# Front-end routes the API points clients at
HOME_ROUTE = "/"
LOGIN_ROUTE = "/login"
DIRECTORY_ROUTE = "/businesses"
DASHBOARD_ROUTE = "/dashboard"
MANAGE_ROUTE = "/business/manage"
RESET_PASSWORD_ROUTE = "/reset-password"

PROTECTED_ROUTES = (DASHBOARD_ROUTE, MANAGE_ROUTE)

DASHBOARD_TABS = ["overview", "users"]
