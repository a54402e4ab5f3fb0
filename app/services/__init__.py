"""Services package: expose all concrete services from one import."""
from .user_service import UserService
from .library_service import LibraryService
from .session_log_service import SessionLogService
from .blog_service import BlogService
from .stats_service import StatsService
from .activity_service import ActivityService

__all__ = [
    'UserService',
    'LibraryService',
    'SessionLogService',
    'BlogService',
    'StatsService',
    'ActivityService',
]
