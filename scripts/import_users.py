"""
교직원 계정 CSV/XLSX 일괄 등록 (명령행)

    python -m scripts.import_users data/faculty.xlsx
"""

import argparse
import logging
import sys
from pathlib import Path

from database.init_db import init_db
from services.user_import import import_file

logger = logging.getLogger(__name__)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Bulk-import faculty accounts from a .csv or .xlsx file")
    parser.add_argument("path", help="업로드할 파일 경로 (.csv / .xlsx)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")
    path = Path(args.path)
    if not path.is_file():
        logger.error("file not found: %s", path)
        return 1

    init_db()
    result = import_file(path.read_bytes(), path.name)
    for item in result.detailed_feedback:
        if item.status != "imported":
            print(f"  row {item.row} ({item.email}): {item.status} - {item.message}")
    for error in result.errors:
        if error.row == 0:
            print(f"  {error.message}")

    print(f"✅ 총 {result.total}행: 등록 {result.imported}, 건너뜀 {result.skipped}")
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
