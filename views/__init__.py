from .assignment_details import AssignmentDetailController
from .assignments_admin import AssignmentsAdminController
from .client import ApiClient, ApiError
from .login import LoginController
from .store import SortState, Store, filter_records, sort_records
from .students_admin import StudentsAdminController
from .weekly_admin import WeeksAdminController
from .weekly_details import WeekDetailController
from .weekly_list import WeekListController
