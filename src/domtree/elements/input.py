import math
import re
from typing import List, Optional

from bs4 import Tag

from ..core import ControlBase, ElementDefinition, ValidityResult, validity_spec
from ..tree import form_owner, get_attribute, has_attribute, input_type, tree_root

TEXT_TYPES = ("text", "search", "tel", "password", "url", "email")
DATE_TYPES = ("date", "month", "week", "time", "datetime-local")
VALUE_MISSING_TYPES = TEXT_TYPES + DATE_TYPES + ("number", "checkbox", "radio", "file")
RANGE_TYPES = ("number",) + DATE_TYPES

_FLOAT_RE = re.compile(r"^-?(?:\d+(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?$")
_EMAIL_RE = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)
_SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")
_COLOR_RE = re.compile(r"^#[0-9a-fA-F]{6}$")
_DATE_FORMATS = {
    "date": re.compile(r"^\d{4,}-\d{2}-\d{2}$"),
    "month": re.compile(r"^\d{4,}-\d{2}$"),
    "week": re.compile(r"^\d{4,}-W\d{2}$"),
    "time": re.compile(r"^\d{2}:\d{2}(?::\d{2}(?:\.\d{1,3})?)?$"),
    "datetime-local": re.compile(r"^\d{4,}-\d{2}-\d{2}[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d{1,3})?)?$"),
}


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parses a valid HTML floating-point number, or returns None."""
    if value is None or not _FLOAT_RE.match(value):
        return None
    return float(value)


def _format_number(number: float) -> str:
    return str(int(number)) if number.is_integer() else repr(number)


class InputControl(ControlBase):
    tag: str = "input"
    type: str = "text"
    value: str = ""
    checked: bool = False
    readonly: bool = False
    group_checked: bool = False
    group_required: bool = False

    @property
    def multiple(self) -> bool:
        return "multiple" in self.attrs

    @property
    def pattern(self) -> Optional[str]:
        return self.attrs.get("pattern")

    @property
    def value_as_number(self) -> float:
        """Numeric value of number/range inputs; NaN when the value is empty or another type."""
        if self.type not in ("number", "range"):
            return math.nan
        number = parse_float(self.value)
        return math.nan if number is None else number

    def limit(self, attr: str) -> Optional[str]:
        """Returns a min/max attribute when it is valid for the input type."""
        raw = self.attrs.get(attr)
        if raw is None:
            return None
        if self.type in ("number", "range"):
            return raw if parse_float(raw) is not None else None
        fmt = _DATE_FORMATS.get(self.type)
        return raw if fmt and fmt.match(raw) else None


def sanitize_value(kind: str, raw: Optional[str], tag: Tag) -> str:
    """Applies the HTML value sanitization algorithm of an input type to its value attribute."""
    if kind in ("checkbox", "radio"):
        return "on" if raw is None else raw
    value = raw or ""
    if kind in ("text", "search", "tel", "password"):
        return value.replace("\r", "").replace("\n", "")
    if kind == "url":
        return value.replace("\r", "").replace("\n", "").strip()
    if kind == "email":
        value = value.replace("\r", "").replace("\n", "")
        if has_attribute(tag, "multiple"):
            return ",".join(part.strip() for part in value.split(","))
        return value.strip()
    if kind == "number":
        return value if parse_float(value) is not None else ""
    if kind == "range":
        low = parse_float(get_attribute(tag, "min")) or 0.0
        high = parse_float(get_attribute(tag, "max"))
        high = 100.0 if high is None else high
        if high < low:
            high = low
        number = parse_float(value)
        if number is None:
            number = low + (high - low) / 2
        return _format_number(min(max(number, low), high))
    if kind == "color":
        return value.lower() if _COLOR_RE.match(value) else "#000000"
    if kind in _DATE_FORMATS:
        return value if _DATE_FORMATS[kind].match(value) else ""
    if kind == "file":
        return ""
    return value


def _radio_group(tag: Tag) -> List[Tag]:
    """Returns the radios sharing name and form owner with the given radio, in tree order."""
    name = get_attribute(tag, "name") or ""
    if not name:
        return [tag]
    owner = form_owner(tag)
    group = []
    for candidate in tree_root(tag).find_all("input"):
        if input_type(candidate) != "radio" or get_attribute(candidate, "name") != name:
            continue
        if form_owner(candidate) is owner:
            group.append(candidate)
    return group or [tag]


def parse_input(tag: Tag) -> InputControl:
    kind = input_type(tag)
    checked = has_attribute(tag, "checked")
    group_checked = checked
    group_required = has_attribute(tag, "required")

    if kind == "radio":
        group = _radio_group(tag)
        checked_members = [member for member in group if has_attribute(member, "checked")]
        # Only the last checked radio of a group stays checked
        checked = bool(checked_members) and checked_members[-1] is tag
        group_checked = bool(checked_members)
        group_required = any(has_attribute(member, "required") for member in group)

    return InputControl(
        attrs=dict(tag.attrs),
        name=get_attribute(tag, "name") or "",
        disabled=has_attribute(tag, "disabled"),
        type=kind,
        value=sanitize_value(kind, get_attribute(tag, "value"), tag),
        checked=checked,
        readonly=has_attribute(tag, "readonly"),
        group_checked=group_checked,
        group_required=group_required,
    )


# --- CONSTRAINT RULES ---

@validity_spec(flags=["value_missing"])
def check_value_missing(control: InputControl) -> ValidityResult:
    if control.type not in VALUE_MISSING_TYPES:
        return []
    if control.type == "checkbox":
        missing = control.required and not control.checked
    elif control.type == "radio":
        missing = control.group_required and not control.group_checked
    elif control.type == "file":
        missing = control.required
    else:
        missing = control.required and control.value == ""
    return ["value_missing"] if missing else []


@validity_spec(flags=["type_mismatch"])
def check_type_mismatch(control: InputControl) -> ValidityResult:
    if not control.value:
        return []
    if control.type == "email":
        addresses = control.value.split(",") if control.multiple else [control.value]
        if not all(_EMAIL_RE.match(address) for address in addresses):
            return ["type_mismatch"]
    elif control.type == "url":
        scheme = control.value.split(":", 1)[0] if ":" in control.value else ""
        if not scheme or not _SCHEME_RE.match(scheme):
            return ["type_mismatch"]
    return []


@validity_spec(flags=["pattern_mismatch"])
def check_pattern_mismatch(control: InputControl) -> ValidityResult:
    if control.type not in TEXT_TYPES or not control.value or control.pattern is None:
        return []
    try:
        compiled = re.compile(f"(?:{control.pattern})")
    except re.error:
        # Invalid patterns are ignored by browsers as well
        return []
    values = control.value.split(",") if control.type == "email" and control.multiple else [control.value]
    if all(compiled.fullmatch(value) for value in values):
        return []
    return ["pattern_mismatch"]


@validity_spec(flags=["range_underflow", "range_overflow"])
def check_range(control: InputControl) -> ValidityResult:
    if control.type not in RANGE_TYPES or not control.value:
        return []
    low, high = control.limit("min"), control.limit("max")
    flags = []
    if control.type == "number":
        value = control.value_as_number
        if low is not None and value < float(low):
            flags.append("range_underflow")
        if high is not None and value > float(high):
            flags.append("range_overflow")
    else:
        # Same-type date/time strings order lexicographically
        if low is not None and control.value < low:
            flags.append("range_underflow")
        if high is not None and control.value > high:
            flags.append("range_overflow")
    return flags


@validity_spec(flags=["step_mismatch"])
def check_step_mismatch(control: InputControl) -> ValidityResult:
    if control.type != "number" or not control.value:
        return []
    raw_step = (control.attrs.get("step") or "").strip().lower()
    if raw_step == "any":
        return []
    step = parse_float(raw_step)
    if step is None or step <= 0:
        step = 1.0
    base = parse_float(control.attrs.get("min"))
    if base is None:
        base = parse_float(control.attrs.get("value"))
    if base is None:
        base = 0.0
    quotient = (control.value_as_number - base) / step
    if abs(quotient - round(quotient)) > 1e-9:
        return ["step_mismatch"]
    return []


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="input",
    model=InputControl,
    parser=parse_input,
    validity_rules=[
        check_value_missing,
        check_type_mismatch,
        check_pattern_mismatch,
        check_range,
        check_step_mismatch,
    ]
)
