import bleach
import re

def sanitize_string(text, allowed_tags=None):
    """Sanitize a string by removing HTML tags and stripping whitespace"""
    if text is None:
        return ''

    if allowed_tags:
        # Allow specific HTML tags
        text = bleach.clean(text, tags=allowed_tags, strip=True)
    else:
        # Remove all HTML tags
        text = bleach.clean(text, tags=[], strip=True)

    return text.strip()

def sanitize_tags(value):
    """Normalize amenities/tags into a pipe-delimited string.

    Accepts either a pipe-delimited string or a list of strings; empty
    tokens are dropped.
    """
    if value is None:
        return ''

    items = value if isinstance(value, list) else str(value).split('|')
    tokens = [sanitize_string(item).replace('|', '') for item in items]

    return '|'.join(token for token in tokens if token)

def sanitize_search_query(query):
    """Sanitize search query by removing special characters"""
    if not query:
        return ''

    # Remove SQL injection risky characters
    query = re.sub(r'[;\'"\\]', '', query)

    # Limit length
    query = query[:200]

    return query.strip()
