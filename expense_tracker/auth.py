# expense_tracker/auth.py
import logging

from flask import Blueprint, jsonify, request
from flask_jwt_extended import create_access_token, current_user, jwt_required
from werkzeug.security import check_password_hash, generate_password_hash

from . import store
from .validation import validate_registration

logger = logging.getLogger("expense-tracker")

auth_bp = Blueprint("auth", __name__)


def _token_response(user, status=200):
    token = create_access_token(identity=str(user.id))
    return jsonify({"access_token": token, "user": user.to_dict()}), status


@auth_bp.route("/register", methods=["POST"])
def register():
    data, error = validate_registration(request.get_json(silent=True))
    if error:
        return jsonify({"msg": error}), 400

    if store.find_user(data['email'], data['username']):
        return jsonify({"msg": "User already exists"}), 400

    user = store.create_user(
        username=data['username'],
        email=data['email'],
        password_hash=generate_password_hash(data['password']),
    )
    logger.info(f"✅ Registered user {user.id} ({user.username})")
    return _token_response(user, 201)


@auth_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"msg": "Request body must be a JSON object"}), 400
    email, password = data.get('email'), data.get('password')
    if not isinstance(email or '', str) or not isinstance(password or '', str):
        return jsonify({"msg": "Email and password must be strings"}), 400
    email = (email or '').strip().lower()

    if not email or not password:
        return jsonify({"msg": "Email and password are required"}), 400

    user = store.get_user_by_email(email)
    if not user or not check_password_hash(user.password_hash, password):
        logger.warning(f"Failed login for {email}")
        return jsonify({"msg": "Invalid credentials"}), 400

    logger.info(f"User {user.id} logged in")
    return _token_response(user)


@auth_bp.route("/me", methods=["GET"])
@jwt_required()
def me():
    return jsonify(current_user.to_dict())
