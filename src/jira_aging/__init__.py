from .application.services import AgingReportService
from .adapters.jira.client import JiraClient
from .domain.calendar import CivilDate, business_days_until, next_civil_date, normalize
from .domain.time import Instant
from .infrastructure.cache.file import FileResponseCache
from .infrastructure.cache.in_memory import InMemoryResponseCache

__all__ = [
    "AgingReportService",
    "JiraClient",
    "CivilDate",
    "business_days_until",
    "next_civil_date",
    "normalize",
    "Instant",
    "FileResponseCache",
    "InMemoryResponseCache",
]
