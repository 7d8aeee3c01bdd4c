from flask import Blueprint, request, jsonify
from flask_login import login_required
from terranav.middleware import admin_required, current_principal
from terranav.schemas import ReportCreate, StatusUpdate
from terranav.serializers import report_payload
from terranav.services import moderation_service
from terranav.services.audit_service import log_audit
from terranav.utils import parse_payload, request_payload
import logging

logger = logging.getLogger(__name__)

bp = Blueprint('reports', __name__)


@bp.route('/api/reports', methods=['GET'])
@login_required
@admin_required
def list_reports():
    reports = moderation_service.list_reports(
        status=request.args.get('status') or None)
    return jsonify([report_payload(r) for r in reports])


@bp.route('/api/reports', methods=['POST'])
@login_required
def create_report():
    data = parse_payload(ReportCreate, request_payload())
    report = moderation_service.create_report(
        current_principal().user_id, data)
    return jsonify(report_payload(report)), 201


@bp.route('/api/reports/<int:id>', methods=['PUT'])
@login_required
@admin_required
def update_report(id):
    data = parse_payload(StatusUpdate, request_payload())
    report, previous = moderation_service.set_report_status(id, data.status)

    log_audit(
        actor_id=current_principal().user_id,
        action='REPORT_STATUS_UPDATE',
        target_type='REPORT',
        target_id=report.id,
        payload={'from': previous, 'to': report.status},
    )
    return jsonify(report_payload(report))
