"""
Dashboard Routes

Role dashboards. The gatekeeper has already checked the role by the time
these views run; the admin dashboard additionally needs the admin token.
"""

from datetime import datetime, timezone

from flask import render_template, redirect
from flask_login import login_required, current_user

from explora.admin.decorators import admin_session_required, admin_token_store
from explora.dashboard import dashboard_bp
from explora.gatekeeper import dashboard_for
from explora.models import User, LoginAttempt, Role
from explora.services.tokens import current_session_token


@dashboard_bp.route('/')
def index():
    """Landing page; signed-in users go straight to their dashboard"""
    token = current_session_token()
    if token is not None:
        return redirect(dashboard_for(token))
    return render_template('index.html')


@dashboard_bp.route('/dashboard')
@login_required
def dashboard():
    return render_template('dashboard/index.html', user=current_user)


@dashboard_bp.route('/dashboard/admin')
@admin_session_required
def admin_dashboard():
    """Admin dashboard with an account overview."""
    expires_at = admin_token_store().expires_at
    return render_template(
        'admin/dashboard.html',
        admin_name=getattr(current_user, 'name', None) or 'Admin',
        total_users=User.query.count(),
        total_guides=User.query.filter_by(role=Role.GUIA).count(),
        failed_logins=LoginAttempt.query.filter_by(success=False).count(),
        token_expires_at=datetime.fromtimestamp(expires_at / 1000, timezone.utc) if expires_at else None,
    )


@dashboard_bp.route('/dashboard/guia')
@login_required
def guide_dashboard():
    return render_template('dashboard/guia.html', user=current_user)


@dashboard_bp.route('/dashboard/moderator')
@login_required
def moderator_dashboard():
    return render_template('dashboard/moderator.html', user=current_user)
