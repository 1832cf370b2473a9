import sys
import pytest
from pathlib import Path

# Ensure project root on sys.path
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from sqlhelper import QueryHelper


@pytest.fixture()
def db_path(tmp_path):
    return str(tmp_path / "helper_test.db")


@pytest.fixture()
def helper(db_path):
    db = QueryHelper("sqlite", db_name=db_path)
    db.exec("CREATE TABLE people (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT UNIQUE, age INTEGER)")
    yield db
    db.disconnect()


@pytest.fixture()
def people(helper):
    for name, age in [("ann", 31), ("bob", 42), ("cid", 42)]:
        helper.insert("people", {"name": name, "age": age})
    return helper
