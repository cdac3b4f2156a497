from flask import Blueprint, request
from flask_jwt_extended import jwt_required
from marketplace import db
from marketplace.models.property import Property
from marketplace.services.cache_service import (
    DETAIL_TTL,
    LIST_TTL,
    cached,
    get_cache,
    properties_pattern,
    user_favorites_pattern,
)
from marketplace.services.property_filters import (
    SEARCH_RESULT_LIMIT,
    apply_property_filter,
    build_search_predicate,
    parse_property_filter,
)
from marketplace.utils.decorators import principal_required, current_principal
from marketplace.utils.errors import ApiError
from marketplace.utils.pagination import paginate
from marketplace.utils.sanitizers import sanitize_search_query, sanitize_string, sanitize_tags
from marketplace.utils.validators import get_json_payload, parse_iso_date, validate_property_payload

properties_bp = Blueprint('properties', __name__)

# payload key -> (column attribute, converter)
PROPERTY_FIELDS = {
    'title': ('title', sanitize_string),
    'type': ('type', sanitize_string),
    'price': ('price', float),
    'state': ('state', sanitize_string),
    'city': ('city', sanitize_string),
    'areaSqFt': ('area_sq_ft', float),
    'bedrooms': ('bedrooms', int),
    'bathrooms': ('bathrooms', float),
    'amenities': ('amenities', sanitize_tags),
    'furnished': ('furnished', str),
    'availableFrom': ('available_from', parse_iso_date),
    'listedBy': ('listed_by', str),
    'tags': ('tags', sanitize_tags),
    'colorTheme': ('color_theme', sanitize_string),
    'rating': ('rating', float),
    'isVerified': ('is_verified', bool),
    'listingType': ('listing_type', str),
}


def apply_payload(property, data):
    """Copy recognised payload fields onto the property.

    ``id``, ``_id`` and ``createdBy`` are never taken from the payload.
    """
    for key, (attr, convert) in PROPERTY_FIELDS.items():
        if key in data:
            setattr(property, attr, convert(data[key]))


def invalidate_property_cache():
    cache = get_cache()
    cache.clear(properties_pattern())
    # Favorites lists embed property data
    cache.clear(user_favorites_pattern())


def get_owned_property(property_id, action):
    property = db.session.get(Property, property_id)

    if not property:
        raise ApiError.not_found('Property not found')

    if not property.is_owned_by(current_principal().user_id):
        raise ApiError.forbidden(f'Not authorized to {action} this property')

    return property


@properties_bp.route('/', methods=['GET'], strict_slashes=False)
@cached(LIST_TTL)
def get_properties():
    """Get all properties with pagination and filtering"""
    flt = parse_property_filter(request.args)

    query = apply_property_filter(Property.query, flt)
    query = query.order_by(Property.created_at.desc(), Property.id.desc())

    return paginate(query, lambda p: p.to_dict()), 200


@properties_bp.route('/search', methods=['GET'])
@cached(LIST_TTL)
def search_properties():
    """Free-text search over listings"""
    term = sanitize_search_query(request.args.get('query', ''))

    if not term:
        raise ApiError.bad_request('Search query is required')

    properties = (
        Property.query
        .filter(build_search_predicate(term))
        .order_by(Property.created_at.desc(), Property.id.desc())
        .limit(SEARCH_RESULT_LIMIT)
        .all()
    )

    return {'items': [p.to_dict() for p in properties]}, 200


@properties_bp.route('/<id:property_id>', methods=['GET'])
@cached(DETAIL_TTL)
def get_property(property_id):
    """Get a single property by ID"""
    property = db.session.get(Property, property_id)

    if not property:
        raise ApiError.not_found('Property not found')

    return property.to_dict(), 200


@properties_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@principal_required
def create_property():
    """Create a new property listing"""
    data = get_json_payload()

    errors = validate_property_payload(data)
    if errors:
        raise ApiError.validation(errors)

    property = Property(created_by=current_principal().user_id)
    apply_payload(property, data)

    # The display id derives from the database-generated primary key
    db.session.add(property)
    db.session.commit()

    invalidate_property_cache()

    return property.to_dict(), 201


@properties_bp.route('/<id:property_id>', methods=['PUT'])
@jwt_required()
@principal_required
def update_property(property_id):
    """Update a property listing"""
    data = get_json_payload()

    errors = validate_property_payload(data, partial=True)
    if errors:
        raise ApiError.validation(errors)

    property = get_owned_property(property_id, 'update')

    apply_payload(property, data)
    db.session.commit()

    invalidate_property_cache()

    return property.to_dict(), 200


@properties_bp.route('/<id:property_id>', methods=['DELETE'])
@jwt_required()
@principal_required
def delete_property(property_id):
    """Delete a property listing along with its favorites and recommendations"""
    property = get_owned_property(property_id, 'delete')

    db.session.delete(property)
    db.session.commit()

    invalidate_property_cache()

    return {'message': 'Property removed'}, 200
