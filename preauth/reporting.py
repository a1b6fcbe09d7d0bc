"""KPI reporting and CSV export over tracked requests."""

import csv
import io
from collections import Counter
from datetime import datetime, timedelta
from typing import List, Optional

from .config import get_settings
from .models.core import PARequestRecord, RequestStatus
from .models.reporting import MonthlyTrend, PayerCount, ProcedureCount, ReportSummary


CSV_HEADERS = [
    "Request ID",
    "Patient Name",
    "Procedure Code",
    "Procedure Name",
    "Payer",
    "Status",
    "Created Date",
    "Updated Date",
]


def _average_turnaround_days(requests: List[PARequestRecord]) -> float:
    durations = [
        (r.decided_at - r.created_at).total_seconds() / 86400
        for r in requests
        if r.decided_at is not None
    ]
    if not durations:
        return 0.0
    return round(sum(durations) / len(durations), 1)


def _first_pass_clean_rate(requests: List[PARequestRecord]) -> int:
    drafted = [r for r in requests if r.last_missing is not None]
    if not drafted:
        return 0
    clean = sum(1 for r in drafted if not r.last_missing)
    return round(100 * clean / len(drafted))


def _ranked(counter: Counter) -> List[tuple]:
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))


def build_report(
    requests: List[PARequestRecord],
    now: datetime,
    minutes_saved_per_request: Optional[int] = None,
) -> ReportSummary:
    """Summarize an organization's requests as of `now`."""
    if minutes_saved_per_request is None:
        minutes_saved_per_request = get_settings().minutes_saved_per_request

    one_week_ago = now - timedelta(days=7)

    by_month = Counter((r.created_at.year, r.created_at.month) for r in requests)
    monthly_trends = [
        MonthlyTrend(
            month=datetime(year, month, 1).strftime("%b %Y"),
            requests=count,
            minutes_saved=count * minutes_saved_per_request,
        )
        for (year, month), count in sorted(by_month.items())
    ]

    return ReportSummary(
        requests_this_week=sum(1 for r in requests if r.created_at >= one_week_ago),
        avg_turnaround_days=_average_turnaround_days(requests),
        first_pass_clean_rate=_first_pass_clean_rate(requests),
        total_requests=len(requests),
        pending_requests=sum(1 for r in requests if r.status == RequestStatus.PENDING),
        total_minutes_saved=len(requests) * minutes_saved_per_request,
        requests_by_payer=[
            PayerCount(payer=payer, count=count)
            for payer, count in _ranked(Counter(r.payer for r in requests))
        ],
        requests_by_procedure=[
            ProcedureCount(procedure=code, count=count)
            for code, count in _ranked(Counter(r.procedure_code for r in requests))
        ],
        monthly_trends=monthly_trends,
    )


def export_csv(requests: List[PARequestRecord]) -> str:
    """All requests as CSV, newest first, every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in sorted(requests, key=lambda r: r.created_at, reverse=True):
        writer.writerow([
            r.id,
            r.patient_name or "",
            r.procedure_code,
            r.procedure_name or "",
            r.payer,
            RequestStatus(r.status).value,
            r.created_at.strftime("%Y/%m/%d"),
            r.updated_at.strftime("%Y/%m/%d"),
        ])
    return buffer.getvalue()


def export_filename(now: datetime) -> str:
    return f"preauth-requests-{now.date().isoformat()}.csv"
