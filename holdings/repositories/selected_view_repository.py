"""Repository for the selected-view collection and view ancestry lookups."""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Query

from ..exceptions import SelectedViewNotFoundError
from ..models import SelectedView, View, DataTable, Project, Company, Shareholder
from .base import BaseRepository, record_to_dict


class SelectedViewRepository(BaseRepository[SelectedView]):
    """CRUD for selected_views plus the joins that denormalize them."""

    model_class = SelectedView

    def _not_found(self, selected_id: str) -> SelectedViewNotFoundError:
        return SelectedViewNotFoundError(selected_id)

    def _joined(self) -> Query:
        # Inner joins: rows whose view or table no longer exists drop out.
        return (
            self.db.query(
                SelectedView,
                View.name.label("view_name"),
                View.view_type.label("view_type"),
                DataTable.name.label("table_name"),
                DataTable.color.label("table_color"),
            )
            .join(View, SelectedView.view_id == View.id)
            .join(DataTable, View.table_id == DataTable.id)
        )

    @staticmethod
    def _denormalize(row) -> Dict[str, Any]:
        selected, view_name, view_type, table_name, table_color = row
        data = record_to_dict(selected)
        data.update(
            type="selected",
            view_name=view_name,
            view_type=view_type,
            table_name=table_name,
            table_color=table_color,
        )
        return data

    def list_denormalized(self) -> List[Dict[str, Any]]:
        rows = self._joined().order_by(SelectedView.sort_order).all()
        return [self._denormalize(row) for row in rows]

    def get_denormalized(self, selected_id: str) -> Optional[Dict[str, Any]]:
        row = self._joined().filter(SelectedView.id == selected_id).first()
        return self._denormalize(row) if row else None

    def find_by_view_id(self, view_id: str) -> Optional[SelectedView]:
        return self.db.query(SelectedView).filter(SelectedView.view_id == view_id).first()

    def clear_folder(self, folder_id: str, new_folder_id: Optional[str]) -> int:
        return (
            self.db.query(SelectedView)
            .filter(SelectedView.folder_id == folder_id)
            .update({SelectedView.folder_id: new_folder_id}, synchronize_session="fetch")
        )

    def get_location_row(self, view_id: str):
        """View -> table -> project -> company -> shareholder in one inner-join query.

        Returns None when the view is missing or any link in the chain dangles.
        """
        return (
            self.db.query(
                View.id.label("view_id"), View.name.label("view_name"),
                DataTable.id.label("table_id"), DataTable.name.label("table_name"),
                Project.id.label("project_id"), Project.name.label("project_name"),
                Company.id.label("company_id"), Company.name.label("company_name"),
                Shareholder.id.label("shareholder_id"), Shareholder.name.label("shareholder_name"),
            )
            .join(DataTable, View.table_id == DataTable.id)
            .join(Project, DataTable.project_id == Project.id)
            .join(Company, Project.company_id == Company.id)
            .join(Shareholder, Company.shareholder_id == Shareholder.id)
            .filter(View.id == view_id)
            .first()
        )
