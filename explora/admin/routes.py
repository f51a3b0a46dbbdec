"""
Admin Routes

The master password is checked by the same service that backs
POST /api/admin/auth; the browser then holds the admin token in its session.
"""

import logging

from flask import render_template, request, redirect, url_for, flash
from flask_login import login_user, logout_user, current_user

from explora.admin import admin_bp
from explora.admin.decorators import admin_token_store
from explora.config import current_auth_settings
from explora.gatekeeper import safe_callback
from explora.services.admin_credentials import (
    AdminAuthError,
    AdminCredentialService,
    InvalidAdminPassword,
    MissingPassword,
)
from explora.services.tokens import SENTINEL_ID, SystemAdmin, current_session_token, has_admin_capability

logger = logging.getLogger(__name__)


@admin_bp.route('/login', methods=['GET', 'POST'])
def admin_login():
    """Dedicated admin login page - independent of user sign-in."""
    store = admin_token_store()
    next_url = safe_callback(request.values.get('next') or request.values.get('callbackUrl'))

    if store.restore() and has_admin_capability(current_session_token()):
        return redirect(next_url or url_for('dashboard.admin_dashboard'))

    if request.method == 'POST':
        service = AdminCredentialService(current_auth_settings())
        try:
            token = service.authenticate(request.form.get('password', ''))
        except MissingPassword:
            flash('Please enter the administrator password.', 'danger')
            return render_template('admin/login.html', next_url=next_url), 400
        except InvalidAdminPassword:
            flash('Invalid administrator password.', 'danger')
            return render_template('admin/login.html', next_url=next_url), 401
        except AdminAuthError as e:
            logger.error('Admin login unavailable: %s', e.message)
            flash('Admin login is not available. Check the server configuration.', 'danger')
            return render_template('admin/login.html', next_url=next_url), e.status_code

        store.persist(token)
        if not has_admin_capability(current_session_token()):
            login_user(SystemAdmin())
        logger.info('Admin session opened')
        flash('Welcome, Administrator!', 'success')
        return redirect(next_url or url_for('dashboard.admin_dashboard'))

    return render_template('admin/login.html', next_url=next_url)


@admin_bp.route('/logout', methods=['GET', 'POST'])
def admin_logout():
    """Admin logout - drops the stored admin token."""
    admin_token_store().clear()
    if current_user.is_authenticated and current_user.get_id() == SENTINEL_ID:
        logout_user()
    flash('You have been logged out of the admin panel.', 'info')
    return redirect(url_for('admin.admin_login'))
