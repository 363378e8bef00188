"""
employees.py — Employee Directory

Mock employee records used as gift recipients, with directory search and
upcoming-birthday lookups for the birthday gift flow.
"""

from datetime import date, timedelta
from typing import List, Optional

from pydantic import BaseModel

from .errors import NotFoundError, ValidationError

BIRTHDAY_WINDOWS = ("today", "week", "month", "all")


class Employee(BaseModel):
    """
    An employee who can receive gift cards.

    Attributes:
        id (str): Directory identifier.
        name (str): Full name.
        email (str): Work email; gift cards are delivered here.
        department (str): Owning department.
        dateOfBirth (date, optional): Used for birthday gifts.
    """
    id: str
    name: str
    email: str
    department: str
    dateOfBirth: Optional[date] = None

    @property
    def first_name(self):
        return self.name.split(" ", 1)[0]

    @property
    def last_name(self):
        parts = self.name.split(" ", 1)
        return parts[1] if len(parts) > 1 else ""

    def birthday_in(self, year):
        """Returns this employee's birthday in `year` (Feb 29 falls back to Feb 28)."""
        if self.dateOfBirth is None:
            return None
        try:
            return self.dateOfBirth.replace(year=year)
        except ValueError:
            return date(year, 2, 28)


MOCK_EMPLOYEES = [
    Employee(id="1", name="John Smith", email="john.smith@kyronhr.com", department="Engineering", dateOfBirth=date(1990, 3, 15)),
    Employee(id="2", name="Sarah Johnson", email="sarah.johnson@kyronhr.com", department="Marketing", dateOfBirth=date(1988, 7, 22)),
    Employee(id="3", name="Mike Chen", email="mike.chen@kyronhr.com", department="Sales", dateOfBirth=date(1992, 11, 8)),
    Employee(id="4", name="Emily Davis", email="emily.davis@kyronhr.com", department="HR", dateOfBirth=date(1985, 5, 12)),
    Employee(id="5", name="David Wilson", email="david.wilson@kyronhr.com", department="Finance", dateOfBirth=date(1991, 9, 30)),
    Employee(id="6", name="Lisa Brown", email="lisa.brown@kyronhr.com", department="Engineering", dateOfBirth=date(1989, 12, 3)),
    Employee(id="7", name="Tom Anderson", email="tom.anderson@kyronhr.com", department="Operations", dateOfBirth=date(1987, 4, 18)),
    Employee(id="8", name="Anna Rodriguez", email="anna.rodriguez@kyronhr.com", department="Design", dateOfBirth=date(1993, 1, 27)),
]


class EmployeeDirectory:
    """Read-only lookups over a fixed list of employees."""

    def __init__(self, employees: Optional[List[Employee]] = None):
        self._employees = list(MOCK_EMPLOYEES if employees is None else employees)

    def __len__(self):
        return len(self._employees)

    def all(self):
        return list(self._employees)

    def get(self, employee_id):
        for employee in self._employees:
            if employee.id == employee_id:
                return employee
        raise NotFoundError(f"Employee not found: {employee_id}")

    def departments(self):
        return sorted({employee.department for employee in self._employees})

    def search(self, term="", department=""):
        """Matches `term` against name and email (case-insensitive), optionally within a department."""
        needle = (term or "").strip().lower()
        return [
            employee
            for employee in self._employees
            if (not needle or needle in employee.name.lower() or needle in employee.email.lower())
            and (not department or employee.department == department)
        ]

    def upcoming_birthdays(self, window="week", today=None):
        """
        Lists employees whose birthday this year falls in `window`.

        Windows:
            - "today": the birthday is today.
            - "week": the birthday is in the current Monday-to-Sunday week.
            - "month": the birthday is in the current calendar month.
            - "all": every employee with a known date of birth.

        Results are ordered by this year's birthday.

        Raises:
            ValidationError: If `window` is not one of the above.
        """
        if window not in BIRTHDAY_WINDOWS:
            raise ValidationError(f"Unknown birthday window '{window}', expected one of: {', '.join(BIRTHDAY_WINDOWS)}")

        today = today or date.today()
        week_start = today - timedelta(days=today.weekday())
        week_end = week_start + timedelta(days=6)

        matches = []
        for employee in self._employees:
            birthday = employee.birthday_in(today.year)
            if birthday is None:
                continue
            if window == "today" and birthday != today:
                continue
            if window == "week" and not week_start <= birthday <= week_end:
                continue
            if window == "month" and birthday.month != today.month:
                continue
            matches.append((birthday, employee))

        matches.sort(key=lambda pair: pair[0])
        return [employee for _, employee in matches]
