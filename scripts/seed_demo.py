#!/usr/bin/env python3
"""
Seed a database with a small staff directory and walk one leave
application through the full approval chain.

Creates the schema, defines the roles named in the active configuration,
registers a handful of staff, submits a casual leave application and
applies Accept Acting -> Recommend -> Approve through the action handler.

Usage:
    python3 scripts/seed_demo.py
    python3 scripts/seed_demo.py --database-url sqlite:///demo.db --reset
    python3 scripts/seed_demo.py --config path/to/leave.yaml
"""

import argparse
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path
from uuid import uuid4

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

START_DATE = date(2024, 6, 7)


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed a demo leave database")
    parser.add_argument("--config", type=Path, help="YAML configuration set to load")
    parser.add_argument("--database-url", help="Override the configured database URL")
    parser.add_argument("--reset", action="store_true", help="Drop all tables first")
    args = parser.parse_args()

    from leave_config import get_active_config
    from leave_config.bridges import apply_logging, build_database, build_role_names
    from leave_kernel.actions import LeaveActionHandler
    from leave_kernel.domain.leave import LeaveAction, LeaveCategory, LeaveRequest, StaffType
    from leave_kernel.services.staff_directory_service import StaffDirectoryService

    try:
        config = get_active_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    apply_logging(config)
    role_names = build_role_names(config)
    database = build_database(config, args.database_url)

    try:
        print()
        print("  [1/4] Creating schema...")
        if args.reset:
            database.drop_tables()
        database.create_tables()

        print("  [2/4] Registering roles and staff...")
        division = uuid4()
        with database.session_scope() as session:
            directory = StaffDirectoryService(session)
            staff_role = directory.define_role("Staff", {"leave": ["apply", "view_history", "acting"]})
            head_role = directory.define_role(
                "Division Head",
                {"leave": ["apply", "view_history", "recommend", "approve", "manage_balance"]},
            )
            hod_role = directory.define_role(
                role_names.head_of_department,
                {"leave": ["apply", "view_history", "approve", "view_summary"]},
            )
            subject_role = directory.define_role(
                role_names.office_subject_officer, {"leave": ["manage_subject"]},
            )

            requester = directory.register_staff(
                "Asha Perera", role_id=staff_role, division_id=division,
                staff_type=StaffType.OFFICE, designation_grade="MA",
            )
            acting = directory.register_staff(
                "Bandu Silva", role_id=staff_role, division_id=division,
            )
            head = directory.register_staff(
                "Chamari Fernando", role_id=head_role, division_id=division,
            )
            directory.register_staff("Dinesh Jayasuriya", role_id=hod_role)
            directory.register_staff("Eshani Wickrama", role_id=subject_role)

        handler = LeaveActionHandler(database, role_names)

        print("  [3/4] Submitting a casual leave application...")
        result = handler.submit_application(
            requester.staff_id,
            LeaveRequest(
                leave_type=LeaveCategory.CASUAL,
                start_date=START_DATE,
                leave_days=Decimal("3"),
                reason="Family event",
                acting_officer_id=acting.staff_id,
                recommender_id=head.staff_id,
                approver_id=head.staff_id,
            ),
        )
        if not result.success:
            print(f"  ERROR: {result.error}", file=sys.stderr)
            return 1
        application = result.application
        print(f"         {application.leave_days} days from {application.start_date}, "
              f"resuming {application.resume_date}")

        print("  [4/4] Walking the approval chain...")
        steps = (
            (LeaveAction.ACCEPT_ACTING, acting.staff_id, "Happy to cover"),
            (LeaveAction.RECOMMEND, head.staff_id, "Recommended"),
            (LeaveAction.APPROVE, head.staff_id, "Approved"),
        )
        for i, (action, actor_id, comment) in enumerate(steps, 1):
            outcome = handler.apply_action(application.id, action.value, actor_id, comment)
            status = "OK" if outcome.success else f"FAILED {outcome.code}"
            print(f"         {i}. [{status}] {action.value}")
            if not outcome.success:
                return 1

        print()
        print(f"  Done. Application {application.id} approved.")
        print()
        return 0
    finally:
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
