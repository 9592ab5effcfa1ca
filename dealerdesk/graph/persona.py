# dealerdesk/graph/persona.py
from typing import List, Optional

ROLE_PREFIXES = {
    "dealer": "Hi there! As your business partner,",
    "sales_rep": "Hello! Looking at your regional data,",
    "admin": "Good day! From the system overview,",
}
DEFAULT_PREFIX = "Hello!"

ROLE_PERMISSIONS = {
    "dealer": ["View Own Sales", "SKU Availability", "Own Claims", "Submit Claims"],
    "sales_rep": ["Dealer Performance", "Regional Sales", "Product Trends", "Regional Analytics"],
    "admin": ["Full Data Access", "System Logs", "User Management", "Claim Approval"],
}

def role_prefix(role: Optional[str]) -> str:
    return ROLE_PREFIXES.get(role or "", DEFAULT_PREFIX)

def personalize(body: str, role: Optional[str]) -> str:
    return f"{role_prefix(role)} {body}"

def welcome_message(role: Optional[str], name: str = "", region: str = "") -> str:
    if role == "dealer":
        return f"Welcome back, {name}! Query your SKU availability, sales data, and claim statuses."
    if role == "sales_rep":
        return (f"Hello {name}! Access dealer performance, regional sales insights, "
                f"and product trends for {region}.")
    if role == "admin":
        return f"Welcome {name}! You have full system access to all data, analytics, and system logs."
    return "Welcome to the Manufacturing AI Assistant!"

def role_permissions(role: Optional[str]) -> List[str]:
    return list(ROLE_PERMISSIONS.get(role or "", []))
