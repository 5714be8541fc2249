import os
import sys
import json
import logging
from dotenv import load_dotenv
from sqlalchemy.exc import SQLAlchemyError

from db import Base, engine, get_db
from matching.logic.adapter import apply_row_aliases
from matching.models import University

load_dotenv()

logger = logging.getLogger(__name__)

DATA_PATH = os.environ.get(
    "UNIVERSITIES_JSON",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "data/universities.json"),
)


def ensure_universities_table():
    University.__table__.create(bind=engine, checkfirst=True)


def load_entries(path: str) -> list:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    # accept either a bare list or {"universities": [...]}
    if isinstance(data, dict):
        data = data.get("universities", [])
    return [entry for entry in data if isinstance(entry, dict)]


def import_universities(entries: list) -> int:
    """Upsert catalog rows by id; rows without an id are skipped."""
    ensure_universities_table()
    imported = 0
    with get_db() as db:
        for entry in entries:
            if entry.get("id") in (None, ""):
                logger.warning(f"⚠️ Skipping university without id: {entry.get('name')}")
                continue
            entry = apply_row_aliases(entry)
            entry.setdefault("slug", str(entry["id"]))
            University.upsert(db, entry)
            imported += 1
    logger.info(f"✅ Imported {imported} universities")
    return imported


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Base.metadata.create_all(bind=engine)
    path = sys.argv[1] if len(sys.argv) > 1 else DATA_PATH
    try:
        import_universities(load_entries(path))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"❌ Could not read {path}: {e}")
        sys.exit(1)
    except SQLAlchemyError as e:
        logger.error(f"❌ Import failed: {e}")
        sys.exit(1)
