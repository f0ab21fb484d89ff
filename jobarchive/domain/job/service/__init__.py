from .ledger import VersionLedger
from .schedule import ScheduleService
from .selection import BulkSelectionFilter
from .toggle import ToggleWorkflow

__all__ = ["BulkSelectionFilter", "ScheduleService", "ToggleWorkflow", "VersionLedger"]
