"""
Delete every admission record of a school. Cannot be undone.

Records are deleted in committed batches; if one batch fails, earlier batches stay deleted.
Usage: python -m admission_portal.scripts.clear_school_data UDISE [--yes] [--batch-limit N]
"""

import argparse
import asyncio
import sys
from typing import Optional

from admission_portal.api.v1.maintenance.service import delete_all_admissions_for_school
from admission_portal.core.exceptions import PartialBatchFailure, ServiceError
from admission_portal.db.session import require_sessionmaker


async def clear_school_data(udise: str, batch_limit: Optional[int] = None) -> int:
    try:
        sessionmaker = require_sessionmaker()
        async with sessionmaker() as session:
            result = await delete_all_admissions_for_school(session, udise.upper(), batch_limit=batch_limit)
    except PartialBatchFailure as e:
        print(f"FAILED: {e.message}", file=sys.stderr)
        print(f"{e.deleted_count} record(s) were deleted before the failure.", file=sys.stderr)
        return 1
    except ServiceError as e:
        print(f"FAILED: {e.message}", file=sys.stderr)
        return 1

    print(result.message)
    for number, size in enumerate(result.batches, start=1):
        print(f"  batch {number}: {size} record(s)")
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Delete all admission records of a school.")
    parser.add_argument("udise", help="11-digit UDISE code of the school")
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--batch-limit", type=int, default=None, help="Records per committed batch")
    args = parser.parse_args()

    if not args.yes:
        answer = input(f"Type the UDISE code again to delete all admissions of {args.udise}: ")
        if answer.strip().upper() != args.udise.upper():
            print("UDISE code does not match. Nothing deleted.")
            sys.exit(1)

    sys.exit(asyncio.run(clear_school_data(args.udise, args.batch_limit)))


if __name__ == "__main__":
    main()
