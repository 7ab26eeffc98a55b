"""Link a student to a proctor.

Usage: python scripts/assign_proctor.py <studentId> <facultyId>
"""
from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))

from dotenv import load_dotenv

from proctor_portal.container import build_container
from proctor_portal.core.exceptions import NotFoundError
from proctor_portal.settings import get_settings_module


def main() -> int:
    parser = argparse.ArgumentParser(description="Assign a proctor to a student")
    parser.add_argument("student_id", help="public student id, e.g. S1001")
    parser.add_argument("faculty_id", help="public faculty id, e.g. F2001")
    args = parser.parse_args()

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=dict(settings.DB_CONFIG), client_url=settings.CLIENT_URL)

    try:
        container.profile_service.assign_proctor(student_id=args.student_id, faculty_id=args.faculty_id)
    except NotFoundError as e:
        print(f"ERROR: {e.message}")
        return 1

    print(f"OK: {args.student_id} -> {args.faculty_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
