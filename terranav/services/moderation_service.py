from terranav.extensions import db
from terranav.models import Listing, Report, ReportStatus, User
from terranav.errors import NotFoundError, ValidationError
import logging

logger = logging.getLogger(__name__)


def get_admin_stats():
    return {
        'usersCount': User.query.count(),
        'listingsCount': Listing.query.count(),
        'reportsCount': Report.query.count(),
        'pendingReportsCount': Report.query.filter_by(
            status=ReportStatus.PENDING.value).count(),
    }


def list_reports(status=None):
    query = Report.query
    if status:
        query = query.filter(Report.status == status)
    return query.order_by(Report.created_at.desc(), Report.id.desc()).all()


def create_report(reporter_id, data):
    """File a report. It always starts as pending, filed by the caller."""
    if data.listing_id and db.session.get(Listing, data.listing_id) is None:
        raise ValidationError.for_field('listingId', 'Unknown listing')

    if (
        data.reported_user_id
        and db.session.get(User, data.reported_user_id) is None
    ):
        raise ValidationError.for_field('reportedUserId', 'Unknown user')

    report = Report(
        reporter_id=reporter_id,
        listing_id=data.listing_id,
        reported_user_id=data.reported_user_id,
        reason=data.reason,
        description=data.description,
        status=ReportStatus.PENDING.value,
    )
    db.session.add(report)
    db.session.commit()

    logger.info(
        "Report %s filed by %s (listing=%s, user=%s)",
        report.id,
        reporter_id,
        report.listing_id,
        report.reported_user_id,
    )
    return report


def set_report_status(report_id, status):
    """Overwrite a report status with any value; returns (report, previous).

    Concurrent updates are not serialised: the last write wins.
    """
    report = db.session.get(Report, report_id)
    if report is None:
        raise NotFoundError('Report not found')

    previous = report.status
    report.status = status
    db.session.commit()
    logger.info(
        "Report %s status %s -> %s", report.id, previous, status)
    return report, previous
