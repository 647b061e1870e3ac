"""
SQLite recipe store.

One ``RecipeStore`` is created per process and handed to whoever needs it: the
import tool writes through it, the API's request handlers read through it.
Statements on the shared connection are serialized by a lock.
"""

import json
import logging
import re
import sqlite3
import threading
from typing import Any, Dict, List, Optional, Tuple

from .errors import RecordPersistError, StoreUnavailableError
from .filters import parse_filter
from .models import CanonicalRecipe
from .values import get_number

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS recipes (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  cuisine TEXT CHECK (cuisine IS NULL OR length(cuisine) <= 255),
  title TEXT NOT NULL CHECK (length(trim(title)) > 0 AND length(title) <= 500),
  rating REAL,
  prep_time INTEGER,
  cook_time INTEGER,
  total_time INTEGER,
  description TEXT,
  nutrients TEXT CHECK (nutrients IS NULL OR json_valid(nutrients)),  -- JSON document
  serves TEXT CHECK (serves IS NULL OR length(serves) <= 100),
  created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
  updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_recipes_rating ON recipes(rating);
CREATE INDEX IF NOT EXISTS idx_recipes_cuisine ON recipes(cuisine);
CREATE INDEX IF NOT EXISTS idx_recipes_total_time ON recipes(total_time);
CREATE INDEX IF NOT EXISTS idx_recipes_calories ON recipes(recipe_calories(nutrients));

-- full-text index over title, kept in sync with the base table
CREATE VIRTUAL TABLE IF NOT EXISTS recipes_fts USING fts5(
  title, content='recipes', content_rowid='id'
);
CREATE TRIGGER IF NOT EXISTS recipes_fts_ai AFTER INSERT ON recipes BEGIN
  INSERT INTO recipes_fts(rowid, title) VALUES (new.id, new.title);
END;
CREATE TRIGGER IF NOT EXISTS recipes_fts_ad AFTER DELETE ON recipes BEGIN
  INSERT INTO recipes_fts(recipes_fts, rowid, title) VALUES ('delete', old.id, old.title);
END;
CREATE TRIGGER IF NOT EXISTS recipes_fts_au AFTER UPDATE ON recipes BEGIN
  INSERT INTO recipes_fts(recipes_fts, rowid, title) VALUES ('delete', old.id, old.title);
  INSERT INTO recipes_fts(rowid, title) VALUES (new.id, new.title);
END;
"""

COLUMNS = (
    "id, title, cuisine, rating, prep_time, cook_time, total_time, "
    "description, nutrients, serves, created_at, updated_at"
)

SORT_COLUMNS = ("id", "title", "rating", "prep_time", "cook_time", "total_time", "created_at", "updated_at")

SEARCH_ORDER = "ORDER BY (rating IS NULL) ASC, rating DESC, title ASC"

# numbers like "389 kcal" or "1,200 kcal"
_calorie_re = re.compile(r"[0-9]+(?:\.[0-9]+)?")


def calories_of(nutrients: Optional[str]) -> Optional[float]:
    """SQL function: numeric calories amount from a nutrients JSON document."""
    if not nutrients:
        return None
    try:
        doc = json.loads(nutrients)
    except ValueError:
        return None
    if not isinstance(doc, dict):
        return None
    number = get_number(doc, "calories")
    if number is not None:
        return number
    cal = doc.get("calories")
    if isinstance(cal, str):
        m = _calorie_re.search(cal.replace(",", ""))
        if m:
            return float(m.group(0))
    return None


def fold_case(text: Optional[str]) -> Optional[str]:
    """SQL function: Unicode case folding, SQLite LIKE only folds ASCII."""
    return text.casefold() if isinstance(text, str) else text


def _like_pattern(text: str) -> str:
    escaped = text.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _fts_query(text: str) -> str:
    # every word as a quoted prefix term, so user input never hits FTS syntax
    terms = [t.replace('"', '""') for t in text.split()]
    return " ".join(f'"{t}"*' for t in terms)


def _row_to_dict(cursor: sqlite3.Cursor, row: tuple) -> Dict[str, Any]:
    rec = {col[0]: row[idx] for idx, col in enumerate(cursor.description)}
    if "nutrients" in rec:
        try:
            rec["nutrients"] = json.loads(rec["nutrients"]) if rec["nutrients"] else None
        except ValueError:
            logger.warning("Recipe %s has undecodable nutrients", rec.get("id"))
            rec["nutrients"] = None
    return rec


def order_clause(sort_by: str, sort_order: str) -> str:
    column = sort_by if sort_by in SORT_COLUMNS else "rating"
    order = "ASC" if str(sort_order).upper() == "ASC" else "DESC"
    return f"ORDER BY ({column} IS NULL) ASC, {column} {order}, id ASC"


class RecipeStore:
    def __init__(self, path: str):
        self.path = path
        self._lock = threading.RLock()
        try:
            self._conn = sqlite3.connect(path, check_same_thread=False)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot open database {path}: {e}") from e
        self._conn.row_factory = _row_to_dict
        # recipe_calories is used by an index expression
        self._conn.execute("PRAGMA trusted_schema = ON")
        self._conn.create_function("recipe_calories", 1, calories_of, deterministic=True)
        self._conn.create_function("casefold", 1, fold_case, deterministic=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _query(self, sql: str, args=()) -> List[Dict[str, Any]]:
        with self._lock:
            return self._conn.execute(sql, args).fetchall()

    def _scalar(self, sql: str, args=()) -> Any:
        with self._lock:
            row = self._conn.execute(sql, args).fetchone()
        return next(iter(row.values())) if row else None

    # --- lifecycle ---
    def initialize(self) -> None:
        try:
            with self._lock:
                self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Cannot create schema in {self.path}: {e}") from e
        logger.info("Schema ready in %s", self.path)

    def ping(self) -> None:
        try:
            self._scalar("SELECT 1")
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"Database connection failed: {e}") from e

    # --- writes ---
    def insert(self, recipe: CanonicalRecipe) -> int:
        nutrients = None
        if recipe.nutrients is not None:
            nutrients = json.dumps(recipe.nutrients, ensure_ascii=False)
        try:
            with self._lock, self._conn:
                cur = self._conn.execute(
                    """
                    INSERT INTO recipes
                    (title, description, cuisine, rating, prep_time, cook_time, total_time, serves, nutrients)
                    VALUES (?,?,?,?,?,?,?,?,?)
                    """,
                    (recipe.title, recipe.description, recipe.cuisine, recipe.rating,
                     recipe.prep_time, recipe.cook_time, recipe.total_time, recipe.serves, nutrients),
                )
                return cur.lastrowid
        except (sqlite3.Error, OverflowError) as e:
            # OverflowError: integer beyond SQLite's 64-bit range
            raise RecordPersistError(str(e)) from e

    def delete_all(self) -> int:
        with self._lock, self._conn:
            deleted = self._conn.execute("DELETE FROM recipes").rowcount
        logger.info("All existing recipes deleted (%d)", deleted)
        return deleted

    # --- reads ---
    def count(self) -> int:
        return self._scalar("SELECT COUNT(*) AS cnt FROM recipes")

    def get(self, recipe_id: int) -> Optional[Dict[str, Any]]:
        rows = self._query(f"SELECT {COLUMNS} FROM recipes WHERE id = ?", (recipe_id,))
        return rows[0] if rows else None

    def list_page(
        self, page: int = 1, limit: int = 10, sort_by: str = "rating", sort_order: str = "DESC"
    ) -> Tuple[List[Dict[str, Any]], int]:
        total = self.count()
        offset = (page - 1) * limit
        rows = self._query(
            f"SELECT {COLUMNS} FROM recipes {order_clause(sort_by, sort_order)} LIMIT ? OFFSET ?",
            (limit, offset),
        )
        return rows, total

    def search(
        self,
        title: Optional[str] = None,
        cuisine: Optional[str] = None,
        rating: Optional[str] = None,
        total_time: Optional[str] = None,
        calories: Optional[str] = None,
        q: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        where, args = [], []
        if title:
            where.append("casefold(title) LIKE ? ESCAPE '\\'"); args.append(_like_pattern(title))
        if cuisine:
            where.append("casefold(cuisine) LIKE ? ESCAPE '\\'"); args.append(_like_pattern(cuisine))
        for column, token in (
            ("rating", rating),
            ("total_time", total_time),
            ("recipe_calories(nutrients)", calories),
        ):
            expr = parse_filter(token) if token else None
            if expr is None:
                continue
            # parse_filter only yields operators from a closed set
            where.append(f"{column} {expr.operator} ?"); args.append(expr.value)
        if q and q.strip():
            where.append("id IN (SELECT rowid FROM recipes_fts WHERE recipes_fts MATCH ?)")
            args.append(_fts_query(q))

        clause = ("WHERE " + " AND ".join(where)) if where else ""
        return self._query(f"SELECT {COLUMNS} FROM recipes {clause} {SEARCH_ORDER}", args)
