from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required, login_user, logout_user
from storefront.services import accounts

bp = Blueprint('auth', __name__, url_prefix='/auth')

def _payload():
    return request.get_json(silent=True) or request.form

@bp.route('/register', methods=['POST'])
def register():
    data = _payload()
    user = accounts.register(data.get('name'), data.get('email'), data.get('password'))
    login_user(user)
    return jsonify({'message': 'Registration successful!', 'user': user.to_dict()}), 201

@bp.route('/login', methods=['GET', 'POST'])
def login():
    if request.method == 'GET':
        return jsonify({'message': 'Please log in to access this page.'}), 401

    data = _payload()
    user = accounts.sign_in(data.get('email'), data.get('password'))
    return jsonify({'user': user.to_dict(), 'is_admin': accounts.is_admin(user)})

@bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Signed out'})

@bp.route('/me')
def me():
    if not current_user.is_authenticated:
        return jsonify({'user': None})
    return jsonify({'user': current_user.to_dict(), 'is_admin': accounts.is_admin(current_user)})
