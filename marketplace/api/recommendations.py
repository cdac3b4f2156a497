from flask import Blueprint
from flask_jwt_extended import jwt_required
from marketplace import db
from marketplace.models.property import Property
from marketplace.models.recommendation import Recommendation
from marketplace.models.user import User
from marketplace.utils.decorators import principal_required, current_principal
from marketplace.utils.errors import ApiError
from marketplace.utils.pagination import paginate
from marketplace.utils.sanitizers import sanitize_string
from marketplace.utils.validators import get_json_payload, validate_recommendation_payload

recommendations_bp = Blueprint('recommendations', __name__)


def get_recommendation_or_404(recommendation_id):
    recommendation = db.session.get(Recommendation, recommendation_id)
    if not recommendation:
        raise ApiError.not_found('Recommendation not found')
    return recommendation


@recommendations_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@principal_required
def create_recommendation():
    """Recommend a property to another user by email"""
    sender_id = current_principal().user_id
    data = get_json_payload()

    errors = validate_recommendation_payload(data)
    if errors:
        raise ApiError.validation(errors)

    property_id = int(data['propertyId'])
    if not db.session.get(Property, property_id):
        raise ApiError.not_found('Property not found')

    recipient = User.query.filter_by(email=data['recipientEmail'].lower().strip()).first()
    if not recipient:
        raise ApiError.not_found('Recipient user not found')

    if recipient.id == sender_id:
        raise ApiError.bad_request('Cannot recommend a property to yourself')

    recommendation = Recommendation(
        sender_id=sender_id,
        recipient_id=recipient.id,
        property_id=property_id,
        message=sanitize_string(data.get('message')),
        is_read=False
    )

    db.session.add(recommendation)
    db.session.commit()

    return recommendation.to_dict(), 201


@recommendations_bp.route('/received', methods=['GET'])
@jwt_required()
@principal_required
def get_received_recommendations():
    """Get recommendations received by the current user"""
    query = (
        Recommendation.query
        .filter_by(recipient_id=current_principal().user_id)
        .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
    )

    return paginate(query, lambda r: r.to_dict(include_sender=True, include_property=True)), 200


@recommendations_bp.route('/sent', methods=['GET'])
@jwt_required()
@principal_required
def get_sent_recommendations():
    """Get recommendations sent by the current user"""
    query = (
        Recommendation.query
        .filter_by(sender_id=current_principal().user_id)
        .order_by(Recommendation.created_at.desc(), Recommendation.id.desc())
    )

    return paginate(query, lambda r: r.to_dict(include_recipient=True, include_property=True)), 200


@recommendations_bp.route('/<id:recommendation_id>/read', methods=['PUT'])
@jwt_required()
@principal_required
def mark_recommendation_as_read(recommendation_id):
    """Mark a recommendation as read (recipient only)"""
    recommendation = get_recommendation_or_404(recommendation_id)

    if recommendation.recipient_id != current_principal().user_id:
        raise ApiError.forbidden('Not authorized to update this recommendation')

    recommendation.mark_read()
    db.session.commit()

    return {'message': 'Recommendation marked as read'}, 200


@recommendations_bp.route('/<id:recommendation_id>', methods=['DELETE'])
@jwt_required()
@principal_required
def delete_recommendation(recommendation_id):
    """Delete a recommendation (sender or recipient)"""
    recommendation = get_recommendation_or_404(recommendation_id)

    if not recommendation.involves(current_principal().user_id):
        raise ApiError.forbidden('Not authorized to delete this recommendation')

    db.session.delete(recommendation)
    db.session.commit()

    return {'message': 'Recommendation removed'}, 200
