import json
import sys
from pathlib import Path

from tracker.db.session import SessionLocal
from tracker.utils.data_transfer import export_data

def main(output_path: Path):
    print("Starting data export...")
    db = SessionLocal()
    try:
        data = export_data(db)
    finally:
        db.close()

    output_path.write_text(json.dumps(data, indent=2))

    print("Export completed.")
    for key in ("users", "buckets", "task_definitions", "daily_logs", "assignments", "task_progress"):
        print(f"  {key:<18} {len(data[key])}")
    print(f"Data exported to: {output_path}")

if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data-export.json"))
