"""
Renumber a school's approved admissions ADM/{yy}/0001, 0002, ... per year in admission-date order.

Safe to re-run: a second run finds nothing to change.
Usage: python -m admission_portal.scripts.repair_admission_numbers UDISE [--batch-limit N]
"""

import argparse
import asyncio
import sys
from typing import Optional

from admission_portal.api.v1.maintenance.service import repair_duplicate_admission_numbers
from admission_portal.core.exceptions import PartialBatchFailure, ServiceError
from admission_portal.db.session import require_sessionmaker


async def repair(udise: str, batch_limit: Optional[int] = None) -> int:
    try:
        sessionmaker = require_sessionmaker()
        async with sessionmaker() as session:
            result = await repair_duplicate_admission_numbers(session, udise.upper(), batch_limit=batch_limit)
    except PartialBatchFailure as e:
        print(f"FAILED: {e.message} ({e.committed_count} record(s) already updated)", file=sys.stderr)
        return 1
    except ServiceError as e:
        print(f"FAILED: {e.message}", file=sys.stderr)
        return 1

    print(result.message)
    if result.batches:
        print("Batches committed: " + ", ".join(str(size) for size in result.batches))
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(description="Fix duplicate or out-of-order admission numbers for a school.")
    parser.add_argument("udise", help="11-digit UDISE code of the school")
    parser.add_argument("--batch-limit", type=int, default=None, help="Records per committed batch")
    args = parser.parse_args()
    sys.exit(asyncio.run(repair(args.udise, args.batch_limit)))


if __name__ == "__main__":
    main()
