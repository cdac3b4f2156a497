import math
from datetime import date, datetime
from flask import request
from email_validator import validate_email as email_validator, EmailNotValidError

from marketplace.models.property import FURNISHED_CHOICES, LISTED_BY_CHOICES, LISTING_TYPE_CHOICES


def validate_email(email):
    """Validate email address"""
    try:
        email_validator(email, check_deliverability=False)
        return True
    except EmailNotValidError:
        return False


def validate_password(password):
    """Validate password strength"""
    if not password:
        return False

    # Minimum 8 characters
    if len(password) < 8:
        return False

    return True


# Largest value a signed 64-bit INTEGER column can hold
MAX_DB_INTEGER = 2 ** 63 - 1


def fits_db_integer(value):
    return -MAX_DB_INTEGER <= value <= MAX_DB_INTEGER


def is_number(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        try:
            return math.isfinite(value)
        except OverflowError:
            return False
    return _parses(value, float)


def is_integer(value):
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return fits_db_integer(value)
    if isinstance(value, float):
        return value.is_integer() and fits_db_integer(value)
    return _parses(value, int) and fits_db_integer(int(value))


def _parses(value, cast):
    if not isinstance(value, str) or not value.strip():
        return False
    try:
        return math.isfinite(cast(value))
    except (ValueError, OverflowError):
        return False


def parse_iso_date(value):
    """Parse an ISO-8601 date or datetime string into a date, or None"""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip().replace('Z', '+00:00')).date()
    except ValueError:
        return None


def _error(field, message):
    return {'field': field, 'message': message}


def _required_text(data, field, message, partial):
    if field not in data:
        return None if partial else _error(field, message)
    value = data[field]
    if not isinstance(value, str) or not value.strip():
        return _error(field, message)
    return None


# field -> (check, message)
PROPERTY_RULES = {
    'price': (is_number, 'Price must be a number'),
    'areaSqFt': (is_number, 'Area must be a number'),
    'bedrooms': (is_integer, 'Bedrooms must be an integer'),
    'bathrooms': (is_number, 'Bathrooms must be a number'),
    'furnished': (lambda v: v in FURNISHED_CHOICES, 'Invalid furnished status'),
    'availableFrom': (lambda v: parse_iso_date(v) is not None, 'Available date must be valid date'),
    'listedBy': (lambda v: v in LISTED_BY_CHOICES, 'Invalid listed by value'),
    'listingType': (lambda v: v in LISTING_TYPE_CHOICES, 'Invalid listing type'),
}

REQUIRED_TEXT_FIELDS = {
    'title': 'Title is required',
    'type': 'Property type is required',
    'state': 'State is required',
    'city': 'City is required',
}


def _is_tag_list(value):
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def validate_property_payload(data, partial=False):
    """Return a list of field errors for a property create or update payload.

    With ``partial`` only the fields present in ``data`` are checked.
    """
    errors = []

    for field, message in REQUIRED_TEXT_FIELDS.items():
        error = _required_text(data, field, message, partial)
        if error:
            errors.append(error)

    for field, (check, message) in PROPERTY_RULES.items():
        if field not in data:
            if not partial:
                errors.append(_error(field, message))
            continue
        if not check(data[field]):
            errors.append(_error(field, message))

    if 'rating' in data:
        rating = data['rating']
        if not is_number(rating) or not 1 <= float(rating) <= 5:
            errors.append(_error('rating', 'Rating must be between 1 and 5'))

    if 'isVerified' in data and not isinstance(data['isVerified'], bool):
        errors.append(_error('isVerified', 'isVerified must be a boolean'))

    for field in ('amenities', 'tags'):
        if field in data and not _is_tag_list(data[field]):
            errors.append(_error(field, f'{field} must be a string or a list of strings'))

    if 'colorTheme' in data and not isinstance(data['colorTheme'], str):
        errors.append(_error('colorTheme', 'Color theme must be a string'))

    return errors


def validate_registration_payload(data):
    errors = []
    email = data.get('email')
    if not isinstance(email, str) or not validate_email(email):
        errors.append(_error('email', 'Please include a valid email'))
    password = data.get('password')
    if not isinstance(password, str) or not validate_password(password):
        errors.append(_error('password', 'Password must be at least 8 characters long'))
    for field, label in (('firstName', 'First name'), ('lastName', 'Last name')):
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            errors.append(_error(field, f'{label} is required'))
    return errors


def validate_recommendation_payload(data):
    errors = []
    email = data.get('recipientEmail')
    if not isinstance(email, str) or not validate_email(email):
        errors.append(_error('recipientEmail', 'Valid recipient email is required'))
    if not is_integer(data.get('propertyId')):
        errors.append(_error('propertyId', 'Property ID is required'))
    if 'message' in data and data['message'] is not None and not isinstance(data['message'], str):
        errors.append(_error('message', 'Message must be a string'))
    return errors


def get_json_payload():
    """Return the request JSON object, or an empty dict for anything else"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
