"""Report generation and PDF download."""

from __future__ import annotations

import io

from flask import jsonify, send_file

from ...extensions import get_context
from ...security import current_user_id, login_required
from ...serializers import report_to_dict
from ...services import reports as service
from ..common import FieldReader, json_body
from . import bp


def _filter() -> service.ReportFilter:
    reader = FieldReader(json_body())
    report_filter = service.ReportFilter(
        start_date=reader.date("startDate"),
        end_date=reader.date("endDate"),
        report_type=reader.text("reportType") or "BOTH",
        category_id=reader.integer("categoryId"),
        group_by=reader.text("groupBy") or "DAILY",
    )
    reader.raise_for_errors("Invalid report filter")
    return report_filter


@bp.post("/generate")
@login_required
def generate():
    report = service.generate_report(get_context(), user_id=current_user_id(), report_filter=_filter())
    return jsonify(report_to_dict(report))


@bp.post("/download-pdf")
@login_required
def download_pdf():
    report = service.generate_report(get_context(), user_id=current_user_id(), report_filter=_filter())
    return send_file(
        io.BytesIO(service.render_pdf(report)),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=service.PDF_FILENAME,
    )
