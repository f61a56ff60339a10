"""State of the widgets rendered on the page.

Each ``Dropdown`` and each ``TableRow`` owns its own state; nothing is shared
between instances. The browser script in ``widget_site.render`` applies the
same commands to the same numbers, so the Python objects double as the
reference for what the page should show after a sequence of clicks.
"""
import json
import math
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from widget_site.errors import SiteConfigError


def round_sum(value: float) -> float:
    # Ties go up, as Math.round does in the page script.
    return math.floor(value * 100 + 0.5) / 100


def format_number(value: float) -> str:
    """Render a sum the way the ``td.sum`` cell shows it: ``15.04``, ``14``, ``0``."""
    text = "%.2f" % round_sum(value)
    text = text.rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


# Text every table carries besides the row names.
RESET_LABEL = "Reset"
HEADER_LABELS = ("Name", "Value", "Sum")

NUMERIC_TEXT = re.compile(r"^[\d.+\-\s]+$")


@dataclass
class Dropdown:
    id: str
    options: List[str]
    placeholder: str = "Select..."
    open: bool = False
    selected: Optional[str] = None

    def __post_init__(self):
        if not self.options:
            raise ValueError(f"dropdown {self.id!r} needs at least one option")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"dropdown {self.id!r} has duplicate options")

    @property
    def label(self) -> str:
        return self.placeholder if self.selected is None else self.selected

    def toggle(self) -> bool:
        self.open = not self.open
        return self.open

    def select_option(self, label: str) -> bool:
        # A hidden list cannot be clicked; treat it as a no-op.
        if label not in self.options:
            raise ValueError(f"{label!r} is not an option of {self.id!r}")
        if not self.open:
            return False
        self.selected = label
        self.open = False
        return True

    def is_visible(self) -> bool:
        return self.open


@dataclass
class TableRow:
    name: str
    value: float
    sum: float
    step: float
    baseline: float = field(init=False)

    def __post_init__(self):
        self.baseline = self.value
        self.sum = round_sum(self.sum)

    @property
    def display_sum(self) -> str:
        return format_number(self.sum)

    def apply_delta(self, delta: float) -> float:
        self.sum = round_sum(self.sum + delta)
        return self.sum

    def set_value(self, value: float) -> float:
        delta = value - self.value
        self.value = value
        return self.apply_delta(delta)

    def add(self) -> float:
        return self.apply_delta(self.step)

    def reset(self) -> float:
        self.value = self.baseline
        self.sum = 0.0
        return self.sum


class AggregationTable:
    def __init__(self, rows):
        self.rows = list(rows)
        self._by_name = {}
        for row in self.rows:
            if row.name in self._by_name:
                raise ValueError(f"duplicate row name {row.name!r}")
            self._by_name[row.name] = row
        # Rows are addressed by case-insensitive text, so no name may contain another.
        for row in self.rows:
            for other in self.rows:
                if row is not other and row.name.lower() in other.name.lower():
                    raise ValueError(f"row name {row.name!r} is part of {other.name!r}")
        chrome = [RESET_LABEL, *HEADER_LABELS] + ["+" + format_number(r.step) for r in self.rows]
        for row in self.rows:
            name = row.name.lower()
            # Sum cells hold arbitrary numbers.
            if NUMERIC_TEXT.match(row.name):
                raise ValueError(f"row name {row.name!r} looks like a number")
            for text in chrome:
                if name in text.lower():
                    raise ValueError(f"row name {row.name!r} is part of {text!r}")

    def __iter__(self) -> Iterator[TableRow]:
        return iter(self.rows)

    def __len__(self):
        return len(self.rows)

    def row(self, name: str) -> TableRow:
        return self._by_name[name]

    def nth(self, index: int) -> TableRow:
        return self.rows[index]

    def index_of(self, name: str) -> int:
        return self.rows.index(self.row(name))

    def sum_of(self, name: str) -> float:
        return self.row(name).sum


@dataclass
class Site:
    dropdowns: List[Dropdown]
    table: AggregationTable
    title: str = "static-site1"

    def __post_init__(self):
        ids = [d.id for d in self.dropdowns]
        if len(set(ids)) != len(ids):
            raise ValueError("dropdown ids must be unique")

    def dropdown(self, id: str) -> Dropdown:
        for dropdown in self.dropdowns:
            if dropdown.id == id:
                return dropdown
        raise KeyError(id)

    def visible_dropdowns(self) -> List[Dropdown]:
        return [d for d in self.dropdowns if d.is_visible()]


DEFAULT_OPTIONS = ["Option 1", "Option 2", "Option 3"]

# (name, value, sum, step). Alvin resets to 0, Alan reaches 15.04 after one
# add, Jonathan reaches 14 once his value goes from 10 to 2.
DEFAULT_ROWS = [
    ("Alvin", 3, 7.5, 1.25),
    ("Alan", 5, 12.52, 2.52),
    ("Jonathan", 10, 22, 4),
    ("Margaret", 1, 3.3, 0.5),
]


def default_site() -> Site:
    return Site(
        dropdowns=[
            Dropdown("select1", list(DEFAULT_OPTIONS)),
            Dropdown("select2", list(DEFAULT_OPTIONS)),
        ],
        table=AggregationTable(TableRow(*row) for row in DEFAULT_ROWS),
    )


def site_from_dict(data: Dict) -> Site:
    try:
        dropdowns = [
            Dropdown(
                str(item["id"]),
                [str(o) for o in item["options"]],
                placeholder=str(item.get("placeholder", "Select...")),
            )
            for item in data["dropdowns"]
        ]
        rows = [
            TableRow(
                str(item["name"]),
                float(item.get("value", 0)),
                float(item.get("sum", 0)),
                float(item.get("step", 1)),
            )
            for item in data["rows"]
        ]
        return Site(dropdowns, AggregationTable(rows), title=str(data.get("title", "static-site1")))
    except (KeyError, TypeError, ValueError) as e:
        raise SiteConfigError(f"invalid site definition: {e}") from e


def load_site(path) -> Site:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SiteConfigError(f"cannot read site file {path}: {e}") from e
    return site_from_dict(data)
