from specviz_qt.services.status_service import StatusService
from specviz_qt.services.dialog_service import DialogService
from specviz_qt.services.recent_files_service import RecentFilesService
from specviz_qt.services.worker import read_in_worker

__all__ = ["StatusService", "DialogService", "RecentFilesService", "read_in_worker"]
