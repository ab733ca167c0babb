"""Application services: class scoping, reordering, status rules, import/export and analytics."""
from .classes import ClassService
from .curriculum import CurriculumService, reorder_units, move_lesson
from .curriculum_templates import list_curriculum_templates, get_curriculum_template
from .submissions import SubmissionService
from .runner import RunnerService
from .roster import RosterService, parse_roster_csv
from .library import LibraryService, parse_lesson_import
from .analytics import AnalyticsService
from .help_queue import HelpQueueService
from .announcements import AnnouncementService
from .rubrics import RubricService, validate_criteria

__all__ = [
    'ClassService',
    'CurriculumService',
    'reorder_units',
    'move_lesson',
    'list_curriculum_templates',
    'get_curriculum_template',
    'SubmissionService',
    'RunnerService',
    'RosterService',
    'parse_roster_csv',
    'LibraryService',
    'parse_lesson_import',
    'AnalyticsService',
    'HelpQueueService',
    'AnnouncementService',
    'RubricService',
    'validate_criteria',
]
