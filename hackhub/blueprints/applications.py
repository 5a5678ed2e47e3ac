"""Application submission and listing routes."""

from __future__ import annotations

from flask import Blueprint, current_app, flash, jsonify, redirect, render_template, request, session, url_for
from flask_login import current_user

from hackhub.auth import admin_required, login_required_with_message
from hackhub.blueprints.problems import OPEN_FORM_SESSION_KEY
from hackhub.errors import HackHubError, UploadError
from hackhub.forms import ApplicationForm
from hackhub.models import ApplicationStatus
from hackhub.services.applications import ApplicationService
from hackhub.services.data_access import DataAccess
from hackhub.services.uploads import delete_upload


applications_bp = Blueprint('applications', __name__)

FORM_FIELDS = ('problem_type', 'title', 'description', 'url', 'github_url', 'video_url', 'tags')


@applications_bp.route('/applications')
@login_required_with_message
def index():
    service = ApplicationService()
    return render_template(
        'applications.html',
        applications=service.applications_for(current_user),
        open_form_url=session.pop(OPEN_FORM_SESSION_KEY, None),
    )


@applications_bp.route('/applications/review')
@admin_required
def review():
    applications = DataAccess().select('applications', {'status': ApplicationStatus.PENDING})
    return render_template('applications.html', applications=applications, reviewing=True)


@applications_bp.route('/applications/screenshot', methods=['POST'])
@login_required_with_message
def upload_screenshot():
    """Upload endpoint used by the form's file widget; returns the public URL."""
    try:
        url = DataAccess().upload_file(request.files.get('file'))
    except UploadError as exc:
        return jsonify({'error': exc.message}), 400
    return jsonify({'url': url}), 201


@applications_bp.route('/submit', methods=['GET', 'POST'])
def submit():
    if not current_user.is_authenticated:
        return render_template('auth_required.html')

    form = ApplicationForm()
    if form.validate_on_submit():
        data = DataAccess()
        uploaded_url = None
        try:
            screenshot_url = form.screenshot_url.data or None
            if form.screenshot.data:
                uploaded_url = screenshot_url = data.upload_file(form.screenshot.data)
            values = {name: form[name].data for name in FORM_FIELDS}
            ApplicationService(data).submit(current_user, values, screenshot_url)
        except HackHubError as exc:
            if uploaded_url:
                delete_upload(uploaded_url)
            flash(exc.message, 'error')
            return render_template('submit.html', form=form)
        except Exception as exc:
            if uploaded_url:
                delete_upload(uploaded_url)
            current_app.logger.error(f"Error submitting application: {exc}")
            flash("Failed to submit application", 'error')
            return render_template('submit.html', form=form)

        flash("Your application has been submitted for review", 'success')
        return redirect(url_for('profile.show'))

    for field_name, errors in form.errors.items():
        for error in errors:
            flash(f"{form[field_name].label.text}: {error}", 'error')

    return render_template('submit.html', form=form)
