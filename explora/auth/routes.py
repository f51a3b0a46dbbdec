"""
Auth Routes

User authentication routes using Flask-Login.
"""

import logging

from flask import current_app, render_template, request, redirect, url_for, flash, jsonify
from flask_login import login_user, logout_user, current_user

from explora.admin.decorators import admin_token_store
from explora.auth import auth_bp
from explora.extensions import db
from explora.gatekeeper import dashboard_for, safe_callback
from explora.models import User
from explora.services.accounts import (
    AccountError,
    RegistrationError,
    SignInError,
    VerificationError,
    authenticate_user,
    change_password,
    issue_verification_token,
    register_user,
    resend_verification,
    verify_email,
)
from explora.services.tokens import SessionToken, current_session_token

logger = logging.getLogger(__name__)


def _text(payload, key):
    value = payload.get(key)
    return value if isinstance(value, str) else ''


@auth_bp.route('/auth/signin', methods=['GET', 'POST'])
def signin():
    """User sign-in with email and password"""
    callback_url = safe_callback(request.values.get('callbackUrl'))

    if current_user.is_authenticated:
        return redirect(callback_url or dashboard_for(current_session_token()))

    if request.method == 'POST':
        email = request.form.get('email', '').strip()
        password = request.form.get('password', '')
        remember = bool(request.form.get('remember'))

        try:
            user = authenticate_user(
                email,
                password,
                ip=request.remote_addr or 'unknown',
                user_agent=request.user_agent.string or 'unknown',
            )
        except SignInError as e:
            flash(e.message, 'danger')
            return render_template('auth/signin.html', callback_url=callback_url, email=email), 401

        login_user(user, remember=remember)
        flash(f'Welcome back, {user.name or user.email}!', 'success')
        return redirect(callback_url or dashboard_for(SessionToken.from_user(user)))

    return render_template('auth/signin.html', callback_url=callback_url)


@auth_bp.route('/login')
def login():
    return redirect(url_for('auth.signin', **request.args))


@auth_bp.route('/auth/signout', methods=['GET', 'POST'])
def signout():
    """Sign out of the user session and drop any admin token"""
    admin_token_store().clear()
    logout_user()
    flash('You have been logged out successfully.', 'info')
    return redirect(url_for('auth.signin'))


@auth_bp.route('/auth/error')
def auth_error():
    return render_template('auth/error.html', error=request.args.get('error', 'Unknown'))


@auth_bp.route('/auth/success')
def auth_success():
    return render_template('auth/success.html', verified=request.args.get('verified') == 'true')


@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'Invalid data'}), 400

    try:
        user = register_user(_text(payload, 'email'), _text(payload, 'password'), _text(payload, 'name'))
    except RegistrationError as e:
        return jsonify({'error': e.message, 'details': e.details}), 400

    issue_verification_token(user.email, current_app.config['VERIFICATION_TOKEN_LIFETIME'])
    return jsonify({'id': user.id, 'email': user.email, 'name': user.name})


@auth_bp.route('/api/auth/verify-email')
def verify_email_link():
    try:
        verify_email(request.args.get('email'), request.args.get('token'))
    except VerificationError as e:
        return redirect(url_for('auth.auth_error', error=e.code))
    return redirect(url_for('auth.auth_success', verified='true'))


@auth_bp.route('/api/auth/session')
def session_info():
    token = current_session_token()
    return jsonify(token.to_dict() if token else {})


@auth_bp.route('/api/auth/resend', methods=['POST'])
def resend():
    """Issue a fresh verification token for an unverified account"""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return jsonify({'error': 'Invalid email address.'}), 400

    try:
        resend_verification(_text(payload, 'email'), current_app.config['VERIFICATION_TOKEN_LIFETIME'])
    except AccountError as e:
        return jsonify({'error': e.message}), e.status_code
    return jsonify({'message': 'Verification email sent.'})


@auth_bp.route('/api/perfil/password', methods=['PUT'])
def password():
    """Change the signed-in user's password"""
    if not current_user.is_authenticated:
        return jsonify({'error': 'Unauthorized'}), 401

    # the master-password identity has no stored password
    user = db.session.get(User, current_user.get_id())
    if user is None:
        return jsonify({'error': 'User not found.'}), 404

    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    try:
        change_password(user, _text(payload, 'currentPassword'), _text(payload, 'newPassword'))
    except AccountError as e:
        return jsonify({'error': e.message}), e.status_code
    return jsonify({
        'message': 'Password updated.',
        'user': {'id': user.id, 'email': user.email, 'name': user.name},
    })
