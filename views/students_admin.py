from config import settings

from .base import Controller
from .rendering import render
from .store import SortState, filter_records, sort_records

STUDENTS_URL = "/students"

# table header order
COLUMNS = ("name", "student_id", "email")


class StudentsAdminController(Controller):
    """Admin portal: student table with add, edit, delete, search, sort and password change."""

    name = "students"
    key = "student_id"

    def __init__(self, client):
        super().__init__(client)
        self.search_term = ""
        self.sort_state = SortState()
        self.editing = None

    def load(self):
        body = self.client.get(STUDENTS_URL)
        self.store.replace(body["data"])

    def events(self):
        return {
            "submit:add-student": self.handle_add_student,
            "submit:edit-student": self.handle_edit_student,
            "submit:change-password": self.handle_change_password,
            "click:table": self.handle_table_click,
            "input:search": self.handle_search,
            "click:header": self.handle_sort,
        }

    def visible(self):
        return filter_records(self.store.items, "name", self.search_term)

    def render(self) -> str:
        return render("students_table.html", students=self.visible(), columns=COLUMNS, message=self.message)

    # ---- handlers ----
    def handle_add_student(self, form: dict) -> bool:
        fields = {k: (form.get(k) or "").strip() for k in ("name", "student_id", "email")}
        password = form.get("password") or ""
        if not all(fields.values()) or not password:
            self.show_message("Please fill out all required fields.")
            return False
        if self.store.find(fields["student_id"]) is not None:
            self.show_message("Student with the same ID already exists.")
            return False

        body = self.attempt("Add student", self.client.post, STUDENTS_URL, json={**fields, "password": password},
                            inline=True)
        if body is None:
            return False
        self.store.add(body.get("data") or fields)
        self.show_message("Student added.", "success")
        return True

    def handle_edit_student(self, form: dict) -> bool:
        student_id = form.get("student_id")
        changes = {k: form[k].strip() for k in ("name", "email") if form.get(k) is not None}
        body = self.attempt("Update student", self.client.put, STUDENTS_URL,
                            json={"student_id": student_id, **changes}, inline=True)
        if body is None:
            return False
        self.store.update(student_id, body.get("data") or changes)
        self.editing = None
        self.show_message("Student updated.", "success")
        return True

    def handle_change_password(self, form: dict) -> bool:
        new_password = form.get("new_password") or ""
        if new_password != (form.get("confirm_password") or ""):
            self.show_message("Passwords do not match.")
            return False
        if len(new_password) < settings.min_password_length:
            self.show_message(f"Password must be at least {settings.min_password_length} characters.")
            return False

        payload = {
            "student_id": form.get("student_id"),
            "current_password": form.get("current_password"),
            "new_password": new_password,
        }
        body = self.attempt("Change password", self.client.post, STUDENTS_URL, json=payload,
                            action="change_password", inline=True)
        if body is None:
            return False
        self.show_message("Password updated successfully!", "success")
        return True

    def handle_table_click(self, action: str, student_id):
        if action == "delete":
            body = self.attempt("Delete student", self.client.delete, STUDENTS_URL, student_id=student_id)
            if body is not None:
                self.store.remove(student_id)
            return body is not None
        if action == "edit":
            self.editing = self.store.find(student_id)
            return self.editing
        return None

    def handle_search(self, term: str):
        self.search_term = term or ""
        return self.visible()

    def handle_sort(self, column_index: int):
        if not 0 <= column_index < len(COLUMNS):
            return self.visible()
        column = COLUMNS[column_index]
        sort_records(self.store.items, column, self.sort_state.toggle(column))
        return self.visible()
