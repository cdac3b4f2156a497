from flask import Blueprint
from flask_jwt_extended import jwt_required
from sqlalchemy.exc import IntegrityError
from marketplace import db
from marketplace.models.favorite import Favorite
from marketplace.models.property import Property
from marketplace.services.cache_service import LIST_TTL, cached, get_cache, user_favorites_pattern
from marketplace.utils.decorators import principal_required, current_principal
from marketplace.utils.errors import ApiError
from marketplace.utils.pagination import paginate
from marketplace.utils.validators import get_json_payload, is_integer

favorites_bp = Blueprint('favorites', __name__)

ALREADY_FAVORITE = 'Property is already in favorites'


@favorites_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@principal_required
def add_to_favorites():
    """Add property to favorites"""
    user_id = current_principal().user_id
    data = get_json_payload()

    property_id = data.get('propertyId')
    if not is_integer(property_id):
        raise ApiError.validation([{'field': 'propertyId', 'message': 'Property ID is required'}])
    property_id = int(property_id)

    if not db.session.get(Property, property_id):
        raise ApiError.not_found('Property not found')

    if Favorite.query.filter_by(user_id=user_id, property_id=property_id).first():
        raise ApiError.conflict(ALREADY_FAVORITE)

    favorite = Favorite(user_id=user_id, property_id=property_id)
    db.session.add(favorite)
    try:
        db.session.commit()
    except IntegrityError:
        # A concurrent request inserted the same pair first
        db.session.rollback()
        raise ApiError.conflict(ALREADY_FAVORITE)

    get_cache().clear(user_favorites_pattern(user_id))

    return favorite.to_dict(), 201


@favorites_bp.route('/<id:property_id>', methods=['DELETE'])
@jwt_required()
@principal_required
def remove_from_favorites(property_id):
    """Remove property from favorites"""
    user_id = current_principal().user_id

    favorite = Favorite.query.filter_by(user_id=user_id, property_id=property_id).first()
    if not favorite:
        raise ApiError.not_found('Favorite not found')

    db.session.delete(favorite)
    db.session.commit()

    get_cache().clear(user_favorites_pattern(user_id))

    return {'message': 'Property removed from favorites'}, 200


@favorites_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required()
@principal_required
@cached(LIST_TTL, per_user=True)
def get_user_favorites():
    """Get the current user's favorites, newest first"""
    query = (
        Favorite.query
        .filter_by(user_id=current_principal().user_id)
        .order_by(Favorite.created_at.desc(), Favorite.id.desc())
    )

    return paginate(query, lambda f: f.to_dict(include_property=True)), 200


@favorites_bp.route('/check/<id:property_id>', methods=['GET'])
@jwt_required()
@principal_required
@cached(LIST_TTL, per_user=True)
def check_favorite(property_id):
    """Check if property is in the current user's favorites"""
    favorite = Favorite.query.filter_by(
        user_id=current_principal().user_id,
        property_id=property_id
    ).first()

    return {'isFavorite': favorite is not None}, 200
