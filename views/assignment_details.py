from .assignments_admin import ASSIGNMENT_ERRORS, ASSIGNMENTS_FILE, COMMENTS_FILE, read_json, to_assignment
from .base import Controller
from .rendering import render
from .store import Store

COMMENT_AUTHOR = "Student"


class AssignmentDetailController(Controller):
    """One assignment with its files and a local discussion thread."""

    name = "assignment details"
    load_errors = ASSIGNMENT_ERRORS

    def __init__(self, assignment_id, assignments_source=ASSIGNMENTS_FILE, comments_source=COMMENTS_FILE):
        super().__init__(client=None)
        self.assignment_id = assignment_id
        self.assignments_source = assignments_source
        self.comments_source = comments_source
        self.assignment = None
        self.status = None
        self.comments: Store = self.store

    def load(self):
        if not self.assignment_id:
            self.status = "Assignment not found."
            raise LookupError("no assignment id")
        try:
            assignments = read_json(self.assignments_source)
            threads = read_json(self.comments_source)
        except (OSError, ValueError):
            self.status = "Error loading assignment details."
            raise

        found = next((a for a in assignments if str(a.get("id")) == str(self.assignment_id)), None)
        if found is None:
            self.status = "Assignment not found."
            raise LookupError(f"unknown assignment {self.assignment_id}")
        self.assignment = to_assignment(found)
        self.comments.replace(threads.get(self.assignment["id"]) or [])
        self.status = None

    def events(self):
        return {"submit:comment": self.handle_add_comment}

    def render(self) -> str:
        return render("assignment_detail.html", assignment=self.assignment, status=self.status,
                      comments=self.comments.items, message=self.message)

    def handle_add_comment(self, text: str) -> bool:
        text = (text or "").strip()
        if not text:
            return False
        self.comments.add({"author": COMMENT_AUTHOR, "text": text})
        return True
