"""
Manage Assignments page.

Assignments have no server endpoint. The list is read from a JSON document
(``data/assignments.json`` unless another path is given) and every change
stays in the page's store.
"""

import json
import time
from pathlib import Path

from .base import Controller
from .rendering import render

DATA_DIR = Path(__file__).resolve().parent / "data"
ASSIGNMENTS_FILE = DATA_DIR / "assignments.json"
COMMENTS_FILE = DATA_DIR / "comments.json"
ASSIGNMENT_ERRORS = (OSError, ValueError, LookupError)


def read_json(path):
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def to_assignment(raw: dict) -> dict:
    """Documents spell the due date ``dueDate``; records use ``due_date``."""
    return {
        "id": str(raw["id"]),
        "title": raw.get("title") or "",
        "due_date": raw.get("dueDate") or raw.get("due_date") or "",
        "description": raw.get("description") or "",
        "files": list(raw.get("files") or []),
    }


class AssignmentsAdminController(Controller):
    """Add, edit and delete assignments. One form serves both adding and, in edit mode, updating."""

    name = "assignments"
    load_errors = ASSIGNMENT_ERRORS

    def __init__(self, source=ASSIGNMENTS_FILE):
        super().__init__(client=None)
        self.source = source
        self.editing_id = None
        self.form = {}

    @property
    def submit_label(self) -> str:
        return "Update Assignment" if self.editing_id is not None else "Save Assignment"

    def load(self):
        self.store.replace(to_assignment(a) for a in read_json(self.source))

    def events(self):
        return {
            "submit:assignment": self.handle_submit,
            "click:table": self.handle_table_click,
        }

    def render(self) -> str:
        return render("assignments_table.html", assignments=self.store.items, submit_label=self.submit_label,
                      message=self.message)

    def new_id(self) -> str:
        stamp = int(time.time() * 1000)
        while self.store.find(f"asg_{stamp}") is not None:
            stamp += 1
        return f"asg_{stamp}"

    def handle_submit(self, form: dict) -> bool:
        title = (form.get("title") or "").strip()
        if not title:
            self.show_message("Assignment title cannot be empty.")
            return False
        due_date = (form.get("due_date") or "").strip()

        if self.editing_id is None:
            self.store.add({"id": self.new_id(), "title": title, "due_date": due_date, "description": "",
                            "files": []})
        else:
            self.store.update(self.editing_id, {"title": title, "due_date": due_date})
            self.editing_id = None
        self.form = {}
        self.message = None
        return True

    def handle_table_click(self, action: str, assignment_id):
        if action == "delete":
            if self.store.find(assignment_id) is None:
                return False
            self.store.remove(assignment_id)
            if self.editing_id == str(assignment_id):
                self.editing_id = None
                self.form = {}
            return True

        if action == "edit":
            assignment = self.store.find(assignment_id)
            if assignment is None:
                return None
            self.editing_id = assignment["id"]
            self.form = {"title": assignment["title"], "due_date": assignment["due_date"]}
            return self.form
        return None
