# routes/auth.py
# Admin login with the shared password

from flask import Blueprint, jsonify, request, session, current_app

from extensions import get_client_id, get_store
from logic import passwords_match

auth_bp = Blueprint('auth', __name__)


def _reset_session():
    # Drop any previous session but keep the id notices are addressed to
    client_id = get_client_id()
    session.clear()
    session['client_id'] = client_id


@auth_bp.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    password = data.get('password')
    if not isinstance(password, str) or not password:
        return jsonify({'error': 'InvalidSubmission', 'message': 'Please enter the admin password.'}), 400

    if passwords_match(password, get_store().admin_password):
        _reset_session()
        session['user_role'] = 'admin'
        current_app.logger.info('Admin logged in')
        return jsonify({'role': 'admin'})

    current_app.logger.warning('Failed admin login attempt')
    return jsonify({'error': 'InvalidPassword', 'message': 'Wrong password. Try again.'}), 401


@auth_bp.route('/logout', methods=['POST'])
def logout():
    _reset_session()
    return jsonify({'role': None})
