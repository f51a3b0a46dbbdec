"""
Admin API Routes
"""

import logging
from datetime import datetime, timedelta

from flask import request, jsonify
from sqlalchemy import func

from explora.admin.decorators import admin_token_required
from explora.api import api_bp
from explora.config import current_auth_settings
from explora.extensions import db
from explora.models import User, LoginAttempt, Role, UserStatus
from explora.services.admin_credentials import AdminAuthError, AdminCredentialService

logger = logging.getLogger(__name__)


@api_bp.errorhandler(AdminAuthError)
def handle_admin_auth_error(error):
    return jsonify({'error': error.message}), error.status_code


def _user_json(user):
    return {
        'id': user.id,
        'email': user.email,
        'name': user.name,
        'role': user.role,
        'status': user.status,
        'email_verified': user.email_verified.isoformat() if user.email_verified else None,
        'last_login': user.last_login.isoformat() if user.last_login else None,
        'created_at': user.created_at.isoformat() if user.created_at else None,
    }


@api_bp.route('/auth', methods=['POST'])
def admin_auth():
    """Exchange the master password for an admin token."""
    payload = request.get_json(silent=True)
    password = payload.get('password') if isinstance(payload, dict) else None
    if not isinstance(password, str):
        password = None

    token = AdminCredentialService(current_auth_settings()).authenticate(password)
    return jsonify({'token': token})


@api_bp.route('/stats')
@admin_token_required
def admin_stats():
    """Account and sign-in counters for the admin dashboard."""
    by_role = dict(db.session.query(User.role, func.count(User.id)).group_by(User.role).all())
    by_status = dict(db.session.query(User.status, func.count(User.id)).group_by(User.status).all())
    since = datetime.utcnow() - timedelta(days=1)

    return jsonify({
        'total_users': User.query.count(),
        'verified_users': User.query.filter(User.email_verified.isnot(None)).count(),
        'users_by_role': {role: by_role.get(role, 0) for role in Role.ALL},
        'users_by_status': {
            status: by_status.get(status, 0)
            for status in (UserStatus.ACTIVE, UserStatus.SUSPENDED, UserStatus.DELETED)
        },
        'login_attempts': {
            'total': LoginAttempt.query.count(),
            'failed': LoginAttempt.query.filter_by(success=False).count(),
            'failed_last_24h': LoginAttempt.query.filter(
                LoginAttempt.success.is_(False), LoginAttempt.created_at >= since
            ).count(),
        },
    })


@api_bp.route('/users')
@admin_token_required
def list_users():
    query = User.query
    role = request.args.get('role')
    if role:
        if role not in Role.ALL:
            return jsonify({'error': f'Unknown role: {role}'}), 400
        query = query.filter_by(role=role)
    users = query.order_by(User.created_at.desc()).all()
    return jsonify([_user_json(u) for u in users])


@api_bp.route('/users/<user_id>/role', methods=['PATCH'])
@admin_token_required
def update_user_role(user_id):
    payload = request.get_json(silent=True) or {}
    role = payload.get('role') if isinstance(payload, dict) else None
    if role not in Role.ALL:
        return jsonify({'error': 'Invalid role'}), 400

    user = db.session.get(User, user_id)
    if user is None:
        return jsonify({'error': 'User not found'}), 404

    previous = user.role
    user.role = role
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        logger.exception('Could not update role for user %s', user_id)
        return jsonify({'error': 'Could not update role'}), 500

    logger.info('Role of user %s changed from %s to %s', user.id, previous, role)
    return jsonify(_user_json(user))
