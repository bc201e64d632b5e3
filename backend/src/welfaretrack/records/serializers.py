"""JSON shapes of the record types for API responses."""

from datetime import date
from typing import Any

from welfaretrack.validation.attributes import AttributeRegistry


def user_summary(user: dict[str, Any]) -> dict[str, Any]:
    """The user as embedded in auth responses."""
    return {
        "id": user["id"],
        "email": user["email"],
        "role": user["role"],
    }


def user_profile(user: dict[str, Any]) -> dict[str, Any]:
    return {**user_summary(user), "created_at": user["created_at"]}


def user_json(user: dict[str, Any]) -> dict[str, Any]:
    return {**user_profile(user), "updated_at": user["updated_at"]}


def _reference(record: dict[str, Any] | None, label: str = "name") -> dict[str, Any] | None:
    if record is None:
        return None
    return {"id": record["id"], label: record[label]}


def _iso_date(value: Any) -> Any:
    return value.isoformat() if isinstance(value, date) else value


class RecordSerializer:
    """Serializes records, adding display labels for enumerated attributes.

    Labels come from the attribute registry's choices_display; a value with
    no configured label is shown as itself.
    """

    def __init__(self, attributes: AttributeRegistry):
        self.attributes = attributes

    def choice_display(self, entity_type: str, attribute: str, value: Any) -> Any:
        if value is None:
            return None
        choices = self.attributes.get_choice_display_names(entity_type, attribute)
        return choices.get(str(value), value)

    def department_json(self, department: dict[str, Any]) -> dict[str, Any]:
        return {
            "id": department["id"],
            "name": department["name"],
            "address": department["address"],
            "status": department["status"],
            "status_display": self.choice_display("department", "status", department["status"]),
            "department_type": department["department_type"],
            "department_type_display": self.choice_display(
                "department", "department_type", department["department_type"]
            ),
            "created_at": department["created_at"],
            "updated_at": department["updated_at"],
        }

    def customer_json(self, customer: dict[str, Any], department: dict[str, Any] | None) -> dict[str, Any]:
        return {
            "id": customer["id"],
            "name": customer["name"],
            "customer_type": customer["customer_type"],
            "customer_type_display": self.choice_display("customer", "customer_type", customer["customer_type"]),
            "status": customer["status"],
            "status_display": self.choice_display("customer", "status", customer["status"]),
            "department": _reference(department),
            "created_at": customer["created_at"],
            "updated_at": customer["updated_at"],
        }

    def work_record_json(
        self,
        work_record: dict[str, Any],
        customer: dict[str, Any] | None,
        staff_user: dict[str, Any] | None,
        department: dict[str, Any] | None,
    ) -> dict[str, Any]:
        return {
            "id": work_record["id"],
            "content": work_record["content"],
            "work_date": _iso_date(work_record["work_date"]),
            "work_type": work_record["work_type"],
            "work_type_display": self.choice_display("work_record", "work_type", work_record["work_type"]),
            "status": work_record["status"],
            "status_display": self.choice_display("work_record", "status", work_record["status"]),
            "customer": _reference(customer),
            "staff_user": _reference(staff_user, label="email"),
            "department": _reference(department),
            "created_at": work_record["created_at"],
            "updated_at": work_record["updated_at"],
        }
