"""Pytest configuration to make the project root importable.

The application is a flat set of modules (``import registry``, ``import db``),
so the repository root has to be on ``sys.path`` when tests run from anywhere.
"""

import os
import sys

import pytest

# Project root = parent directory of this tests/ folder
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    """Point db.DB_FILE at a throwaway SQLite file."""
    import db

    path = tmp_path / "membership.db"
    monkeypatch.setattr(db, "DB_FILE", path)
    db.init_db()
    return path
