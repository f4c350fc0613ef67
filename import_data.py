import json
import sys
from getpass import getpass
from pathlib import Path

from tracker.db.session import SessionLocal, engine
from tracker.db.base import Base
from tracker.core.errors import ValidationError
from tracker.utils.data_transfer import import_data

def main(input_path: Path):
    if not input_path.exists():
        print(f"Export file not found: {input_path}")
        sys.exit(1)

    data = json.loads(input_path.read_text())
    Base.metadata.create_all(bind=engine)

    password = getpass("Temporary password for imported users: ")
    db = SessionLocal()
    try:
        counts = import_data(db, data, password)
    except ValidationError as e:
        print(f"Import failed: {e.message}")
        sys.exit(1)
    finally:
        db.close()

    print("Import completed.")
    for key, count in counts.items():
        print(f"  {key:<18} {count}")
    print("All imported users share the temporary password you entered.")

if __name__ == "__main__":
    main(Path(sys.argv[1]) if len(sys.argv) > 1 else Path("data-export.json"))
