"""Tests for KPI reporting and CSV export."""

import csv
import io
from datetime import datetime, timedelta, UTC

from preauth.models import PARequestRecord, RequestStatus
from preauth.reporting import CSV_HEADERS, build_report, export_csv, export_filename


NOW = datetime(2024, 6, 3, 12, 0, tzinfo=UTC)


def make_record(request_id, payer, procedure_code, created_at, status=RequestStatus.DRAFT,
                decided_at=None, last_missing=None, patient_name=None):
    return PARequestRecord(
        id=request_id,
        org_id="demo-org",
        payer=payer,
        specialty="orthopedics",
        procedure_code=procedure_code,
        status=status,
        patient_name=patient_name,
        procedure_name="Total Knee Replacement" if procedure_code == "TKR" else None,
        created_at=created_at,
        updated_at=decided_at or created_at,
        decided_at=decided_at,
        last_missing=last_missing,
    )


def sample_requests():
    return [
        make_record("PA-1", "Discovery", "TKR", NOW - timedelta(days=40),
                    status=RequestStatus.APPROVED, decided_at=NOW - timedelta(days=37), last_missing=[]),
        make_record("PA-2", "Momentum", "TKR", NOW - timedelta(days=10),
                    status=RequestStatus.DENIED, decided_at=NOW - timedelta(days=8),
                    last_missing=["Imaging Findings"]),
        make_record("PA-3", "Discovery", "THR", NOW - timedelta(days=2),
                    status=RequestStatus.PENDING, last_missing=[]),
        make_record("PA-4", "Bonitas", "THR", NOW - timedelta(hours=5), patient_name='Smith, "JJ"'),
    ]


class TestBuildReport:
    """Test KPI computation."""

    def test_counts(self):
        report = build_report(sample_requests(), NOW, minutes_saved_per_request=15)

        assert report.total_requests == 4
        assert report.requests_this_week == 2
        assert report.pending_requests == 1
        assert report.total_minutes_saved == 60

    def test_turnaround_uses_decided_requests_only(self):
        report = build_report(sample_requests(), NOW, minutes_saved_per_request=15)
        assert report.avg_turnaround_days == 2.5

    def test_clean_rate_over_drafted_requests(self):
        report = build_report(sample_requests(), NOW, minutes_saved_per_request=15)
        # PA-4 was never drafted; two of the remaining three were clean
        assert report.first_pass_clean_rate == 67

    def test_rankings(self):
        report = build_report(sample_requests(), NOW, minutes_saved_per_request=15)

        assert [(p.payer, p.count) for p in report.requests_by_payer] == [
            ("Discovery", 2), ("Bonitas", 1), ("Momentum", 1),
        ]
        assert [(p.procedure, p.count) for p in report.requests_by_procedure] == [("THR", 2), ("TKR", 2)]

    def test_monthly_trends_chronological(self):
        report = build_report(sample_requests(), NOW, minutes_saved_per_request=10)

        assert [(m.month, m.requests, m.minutes_saved) for m in report.monthly_trends] == [
            ("Apr 2024", 1, 10),
            ("May 2024", 1, 10),
            ("Jun 2024", 2, 20),
        ]

    def test_empty(self):
        report = build_report([], NOW, minutes_saved_per_request=15)

        assert report.total_requests == 0
        assert report.avg_turnaround_days == 0.0
        assert report.first_pass_clean_rate == 0
        assert report.monthly_trends == []


class TestExportCsv:
    """Test CSV export of tracked requests."""

    def test_header_and_order(self):
        rows = list(csv.reader(io.StringIO(export_csv(sample_requests()))))

        assert rows[0] == CSV_HEADERS
        assert [row[0] for row in rows[1:]] == ["PA-4", "PA-3", "PA-2", "PA-1"]

    def test_fields_quoted_and_escaped(self):
        output = export_csv(sample_requests())
        lines = output.splitlines()

        assert lines[0].startswith('"Request ID","Patient Name"')
        assert lines[1].startswith('"PA-4","Smith, ""JJ""","THR","","Bonitas","draft"')

    def test_dates_formatted(self):
        rows = list(csv.reader(io.StringIO(export_csv(sample_requests()))))
        pa1 = rows[-1]
        assert pa1[6] == "2024/04/24"
        assert pa1[7] == "2024/04/27"

    def test_empty_export_has_header_only(self):
        assert export_csv([]).splitlines() == [",".join(f'"{h}"' for h in CSV_HEADERS)]

    def test_filename(self):
        assert export_filename(NOW) == "preauth-requests-2024-06-03.csv"
