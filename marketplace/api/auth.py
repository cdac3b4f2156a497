from flask import Blueprint
from flask_jwt_extended import create_access_token, jwt_required
from sqlalchemy.exc import IntegrityError
from marketplace import db
from marketplace.models.user import User
from marketplace.utils.decorators import principal_required, current_principal
from marketplace.utils.errors import ApiError
from marketplace.utils.sanitizers import sanitize_string
from marketplace.utils.validators import get_json_payload, validate_registration_payload

auth_bp = Blueprint('auth', __name__)


def generate_token(user):
    """Issue a bearer token carrying the user id and email"""
    return create_access_token(identity=str(user.id), additional_claims={'email': user.email})


def auth_response(user):
    data = user.to_summary()
    data['token'] = generate_token(user)
    return data


@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new user"""
    data = get_json_payload()

    errors = validate_registration_payload(data)
    if errors:
        raise ApiError.validation(errors)

    email = data['email'].lower().strip()

    if User.query.filter_by(email=email).first():
        raise ApiError.conflict('User already exists')

    user = User(
        email=email,
        first_name=sanitize_string(data['firstName']),
        last_name=sanitize_string(data['lastName']),
    )
    user.set_password(data['password'])

    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration for the same email
        db.session.rollback()
        raise ApiError.conflict('User already exists')

    return auth_response(user), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """Authenticate user & get token"""
    data = get_json_payload()

    email = data.get('email')
    password = data.get('password')

    if not isinstance(email, str) or not isinstance(password, str) or not email or not password:
        raise ApiError.validation([
            {'field': 'email', 'message': 'Email and password are required'},
        ])

    user = User.query.filter_by(email=email.lower().strip()).first()

    if not user or not user.check_password(password):
        raise ApiError.unauthorized('Invalid credentials')

    return auth_response(user), 200


@auth_bp.route('/profile', methods=['GET'])
@jwt_required()
@principal_required
def get_user_profile():
    """Get current user details"""
    user = db.session.get(User, current_principal().user_id)

    if not user:
        raise ApiError.not_found('User not found')

    return user.to_dict(), 200
