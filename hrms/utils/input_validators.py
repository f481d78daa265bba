"""
Input validation and sanitization utilities
"""
import re


MAX_NAME_LENGTH = 100
MAX_SEARCH_LENGTH = 100


def validate_name(name, field_name="Name"):
    """
    Validate name fields (first name, last name, etc.)
    Returns: (is_valid, error_message)
    """
    if not name:
        return True, None

    name_str = str(name).strip()

    if len(name_str) > MAX_NAME_LENGTH:
        return False, f"{field_name} too long (max {MAX_NAME_LENGTH} characters)"

    # Letters (including accented), spaces, hyphens, apostrophes and dots
    if not re.match(r"^[^\W\d_][\w\s\-'.]*$", name_str, re.UNICODE):
        return False, f"{field_name} contains invalid characters"

    return True, name_str


def validate_password_strength(password):
    """
    Validate password meets security requirements
    Returns: (is_valid, error_message)
    """
    if not password:
        return False, "Password is required"

    password_str = str(password)

    if len(password_str) < 8:
        return False, "Password must be at least 8 characters long"

    if len(password_str) > 128:
        return False, "Password too long (max 128 characters)"

    has_uppercase = re.search(r'[A-Z]', password_str)
    has_lowercase = re.search(r'[a-z]', password_str)
    has_digit = re.search(r'\d', password_str)

    missing_requirements = []
    if not has_uppercase:
        missing_requirements.append("one uppercase letter")
    if not has_lowercase:
        missing_requirements.append("one lowercase letter")
    if not has_digit:
        missing_requirements.append("one number")

    if missing_requirements:
        return False, f"Password must contain: {', '.join(missing_requirements)}"

    return True, None


def clean_search_query(query):
    """Trim a free-text search query; returns None when nothing is left"""
    if not query:
        return None
    query_str = str(query).strip()[:MAX_SEARCH_LENGTH]
    return query_str or None


def sanitize_sql_like_pattern(pattern):
    """
    Escape SQL LIKE wildcards so user input is matched literally
    """
    if not pattern:
        return ""

    sanitized = pattern.replace('\\', '\\\\').replace('%', '\\%').replace('_', '\\_')
    return sanitized
