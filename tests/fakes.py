"""In-memory stand-in for the subset of the Supabase client used by the services."""

import copy
import re
import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

from postgrest.exceptions import APIError

EMBED_PATTERN = re.compile(r"(\w+)\(")

# embedded table -> foreign key column on the parent row
EMBED_KEYS = {"user_profiles": "user_id"}

TABLE_DEFAULTS = {
    "groups": lambda: {
        "is_active": True,
        "description": None,
        "created_at": datetime.now(timezone.utc).isoformat(),
        "updated_at": None,
    },
    "group_members": lambda: {
        "role": "LISTENER",
        "seat_position": None,
        "is_admin": False,
        "is_muted": False,
        "is_deafened": False,
        "joined_at": datetime.now(timezone.utc).isoformat(),
    },
}


def unique_violation(constraint):
    return APIError({
        "code": "23505",
        "message": f'duplicate key value violates unique constraint "{constraint}"',
        "details": None,
        "hint": None,
    })


def check_constraints(table, rows):
    if table != "group_members":
        return
    keys = set()
    seats = set()
    for row in rows:
        key = (row["group_id"], row["user_id"])
        if key in keys:
            raise unique_violation("group_members_group_id_user_id_key")
        keys.add(key)
        seat = row.get("seat_position")
        if seat is not None and seat >= 0:
            if (row["group_id"], seat) in seats:
                raise unique_violation("group_members_seat_key")
            seats.add((row["group_id"], seat))


def _parse_clause(clause):
    column, operator, raw = clause.strip().split(".", 2)
    if operator == "is" and raw == "null":
        return lambda row: row.get(column) is None
    value = int(raw) if raw.lstrip("-").isdigit() else raw
    if operator == "eq":
        return lambda row: row.get(column) == value
    if operator == "lt":
        return lambda row: row.get(column) is not None and row.get(column) < value
    raise AssertionError(f"unsupported filter {clause}")


def _sort_key(column):
    return lambda row: (row.get(column) is None, row.get(column))


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.operation = "select"
        self.payload = None
        self.on_conflict = None
        self.embeds = []
        self.filters = []
        self.orders = []
        self._limit = None
        self._offset = 0

    def select(self, columns="*"):
        self.operation = "select"
        self.embeds = [name for name in EMBED_PATTERN.findall(columns) if name in EMBED_KEYS]
        return self

    def insert(self, payload):
        self.operation = "insert"
        self.payload = payload
        return self

    def upsert(self, payload, on_conflict=None):
        self.operation = "upsert"
        self.payload = payload
        self.on_conflict = on_conflict
        return self

    def update(self, fields):
        self.operation = "update"
        self.payload = fields
        return self

    def delete(self):
        self.operation = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def or_(self, filters):
        """PostgREST or filter, e.g. "seat_position.is.null,seat_position.lt.0"."""
        clauses = [_parse_clause(clause) for clause in filters.split(",")]
        self.filters.append(lambda row: any(clause(row) for clause in clauses))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, size):
        self._limit = size
        return self

    def offset(self, size):
        self._offset = size
        return self

    def _matches(self, row):
        return all(check(row) for check in self.filters)

    def _with_defaults(self, row):
        full = TABLE_DEFAULTS.get(self.table, dict)()
        full["id"] = str(uuid.uuid4())
        full.update(row)
        return full

    def _embed(self, row):
        row = copy.deepcopy(row)
        for name in self.embeds:
            key = row.get(EMBED_KEYS[name])
            related = [r for r in self.db.tables.get(name, []) if r.get("id") == key]
            row[name] = copy.deepcopy(related[0]) if related else None
        return row

    def execute(self):
        self.db.executed.append((self.table, self.operation))
        if self.db.fail_with is not None:
            error, self.db.fail_with = self.db.fail_with, None
            raise error

        rows = self.db.tables.setdefault(self.table, [])
        if self.operation == "select":
            result = [row for row in rows if self._matches(row)]
            for column, desc in reversed(self.orders):
                result.sort(key=_sort_key(column), reverse=desc)
            result = result[self._offset:]
            if self._limit is not None:
                result = result[:self._limit]
            return SimpleNamespace(data=[self._embed(row) for row in result])

        if self.operation == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            new_rows = [self._with_defaults(row) for row in payload]
            check_constraints(self.table, rows + new_rows)
            rows.extend(new_rows)
            return SimpleNamespace(data=copy.deepcopy(new_rows))

        if self.operation == "upsert":
            conflict = [c.strip() for c in self.on_conflict.split(",")]
            existing = [r for r in rows if all(r.get(c) == self.payload.get(c) for c in conflict)]
            if existing:
                candidate = {**existing[0], **self.payload}
                check_constraints(self.table, [r for r in rows if r is not existing[0]] + [candidate])
                existing[0].update(self.payload)
                return SimpleNamespace(data=[copy.deepcopy(existing[0])])
            new_row = self._with_defaults(self.payload)
            check_constraints(self.table, rows + [new_row])
            rows.append(new_row)
            return SimpleNamespace(data=[copy.deepcopy(new_row)])

        if self.operation == "update":
            targets = [row for row in rows if self._matches(row)]
            candidate = [{**row, **self.payload} if any(row is t for t in targets) else row for row in rows]
            check_constraints(self.table, candidate)
            for row in targets:
                row.update(self.payload)
            return SimpleNamespace(data=copy.deepcopy(targets))

        if self.operation == "delete":
            removed = [row for row in rows if self._matches(row)]
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return SimpleNamespace(data=copy.deepcopy(removed))

        raise AssertionError(f"unsupported operation {self.operation}")


class FakeAuth:
    def __init__(self):
        self.tokens = {}
        self.calls = 0

    def add_token(self, token, user_id, email, username=None):
        metadata = {"username": username} if username else {}
        self.tokens[token] = SimpleNamespace(id=user_id, email=email, user_metadata=metadata)

    def get_user(self, jwt=None):
        self.calls += 1
        if jwt not in self.tokens:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=self.tokens[jwt])


class FakeSupabase:
    def __init__(self):
        self.tables = {"groups": [], "group_members": [], "user_profiles": []}
        self.executed = []
        self.fail_with = None
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def mutations(self, table="group_members"):
        return [op for t, op in self.executed if t == table and op != "select"]
