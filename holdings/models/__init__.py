"""Database models."""

from .hierarchy import Shareholder, Company, Project, DataTable, View
from .folder import Folder
from .selected_view import SelectedView
from .system import CodeCounter, Setting

__all__ = [
    "Shareholder", "Company", "Project", "DataTable", "View",
    "Folder", "SelectedView",
    "CodeCounter", "Setting",
]
