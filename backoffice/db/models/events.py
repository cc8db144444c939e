from datetime import date
from typing import Optional

from sqlalchemy import event, inspect

from backoffice.db.models.client import Client


def calculate_age(date_of_birth: Optional[date], today: Optional[date] = None) -> Optional[int]:
    """Whole years elapsed since ``date_of_birth``; None when no date is set."""
    if date_of_birth is None:
        return None
    today = today or date.today()
    age = today.year - date_of_birth.year
    if (today.month, today.day) < (date_of_birth.month, date_of_birth.day):
        age -= 1
    return age


@event.listens_for(Client, "before_insert")
def set_client_age_on_insert(mapper, connection, target: Client):
    target.age = calculate_age(target.date_of_birth)


@event.listens_for(Client, "before_update")
def set_client_age_on_update(mapper, connection, target: Client):
    if inspect(target).attrs.date_of_birth.history.has_changes():
        target.age = calculate_age(target.date_of_birth)
