"""Copy planning, file transfer and reporting."""

from .planner import CopyPlanner, build_report, target_filename
from .report import format_report, report_to_dict
from .transfer import ArtifactTransfer, FileTransfer, TransferError

__all__ = [
    "ArtifactTransfer",
    "CopyPlanner",
    "FileTransfer",
    "TransferError",
    "build_report",
    "format_report",
    "report_to_dict",
    "target_filename",
]
