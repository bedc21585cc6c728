"""
Command handlers - one module per verb family.
"""
from .files import list_files, read_file, search_files
from .project import create_project, open_project
from .review import review_file
from .upgrade import upgrade_file, upgrade_folder, FolderUpgradeResult

__all__ = [
    "list_files",
    "read_file",
    "search_files",
    "create_project",
    "open_project",
    "review_file",
    "upgrade_file",
    "upgrade_folder",
    "FolderUpgradeResult",
]
