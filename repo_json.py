# repo_json.py
import json, os, uuid
from datetime import datetime, timezone
from typing import List, Dict

from models import Completion, Routine

ROUTINE_FIELDS = ("name", "description", "color", "icon", "days", "timeOfDay")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JSONRepo:
    """Routine and completion documents in one JSON file, last write wins."""

    def __init__(self, path: str):
        self.path = path
        folder = os.path.dirname(path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        if not os.path.exists(path):
            self._write({"routines": {}, "completions": {}})
        self.data = self._read()

    def _read(self):
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        data.setdefault("routines", {})
        data.setdefault("completions", {})
        return data

    def _write(self, obj):
        tmp = self.path + ".tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, ensure_ascii=False)
        os.replace(tmp, self.path)

    def reload(self):
        self.data = self._read()

    # -------- Routines --------
    def routine_docs(self) -> List[dict]:
        # dicts keep insertion order, so this is creation order
        return [{**doc, "id": rid} for rid, doc in self.data["routines"].items()]

    def list_routines(self) -> List[Routine]:
        return [Routine.from_doc(d) for d in self.routine_docs()]

    def create_routine(self, fields: dict) -> str:
        rid = uuid.uuid4().hex
        stamp = _now()
        doc = {k: fields[k] for k in ROUTINE_FIELDS if k in fields}
        doc["createdAt"] = stamp
        doc["updatedAt"] = stamp
        self.data["routines"][rid] = doc
        self._write(self.data)
        return rid

    def update_routine(self, routine_id: str, fields: dict) -> bool:
        doc = self.data["routines"].get(routine_id)
        if doc is None:
            return False
        doc.update({k: fields[k] for k in ROUTINE_FIELDS if k in fields})
        doc["updatedAt"] = _now()
        self._write(self.data)
        return True

    def delete_routine(self, routine_id: str) -> bool:
        if self.data["routines"].pop(routine_id, None) is None:
            return False
        # drop completions that reference it
        for key, doc in list(self.data["completions"].items()):
            if doc.get("routineId") == routine_id:
                self.data["completions"].pop(key, None)
        self._write(self.data)
        return True

    # -------- Completions --------
    def set_completion(self, date_str: str, routine_id: str, done: bool) -> Completion:
        completion = Completion(
            date=date_str, routine_id=routine_id, done=bool(done), updated_at=_now()
        )
        self.data["completions"][completion.doc_id] = completion.to_doc()
        self._write(self.data)
        return completion

    def completions_for_month(self, year: int, month: int) -> Dict[str, Dict[str, bool]]:
        """Nested date -> routine id -> done map for one month."""
        prefix = f"{year:04d}-{month:02d}-"
        result: Dict[str, Dict[str, bool]] = {}
        for doc in self.data["completions"].values():
            day = doc.get("date", "")
            if not day.startswith(prefix):
                continue
            result.setdefault(day, {})[doc["routineId"]] = bool(doc.get("done"))
        return result
