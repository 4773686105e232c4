from typing import List
from bs4 import Tag
from pydantic import BaseModel, Field

from ..core import ControlBase, ElementDefinition, ValidityResult, validity_spec
from ..tree import closest, get_attribute, has_attribute, text_content


class OptionModel(BaseModel):
    """
    Snapshot of a single <option>.
    'text' is the raw text content, 'value' falls back to the whitespace-collapsed text.
    """
    value: str = ""
    text: str = ""
    selected: bool = False
    disabled: bool = False
    direct_child: bool = False


class SelectControl(ControlBase):
    tag: str = "select"
    multiple: bool = False
    size: int = 0
    options: List[OptionModel] = Field(default_factory=list)

    @property
    def display_size(self) -> int:
        if self.size > 0:
            return self.size
        return 4 if self.multiple else 1

    @property
    def selected_options(self) -> List[OptionModel]:
        return [option for option in self.options if option.selected]

    @property
    def value(self) -> str:
        """The value of the first selected option, or '' when nothing is selected."""
        selected = self.selected_options
        return selected[0].value if selected else ""


def parse_option(option: Tag, select: Tag) -> OptionModel:
    raw_text = text_content(option)
    value = get_attribute(option, "value")
    group = closest(option.parent, "optgroup") if option.parent is not None else None
    return OptionModel(
        value=value if value is not None else " ".join(raw_text.split()),
        text=raw_text,
        selected=has_attribute(option, "selected"),
        disabled=has_attribute(option, "disabled") or (group is not None and has_attribute(group, "disabled")),
        direct_child=option.parent is select,
    )


def parse_select(tag: Tag) -> SelectControl:
    """
    Reads the options of a <select> and applies the selectedness rules:
    a single select keeps only its last 'selected' option and, with a display size of 1,
    falls back to its first enabled option.
    """
    try:
        size = int(get_attribute(tag, "size") or 0)
    except ValueError:
        size = 0

    control = SelectControl(
        attrs=dict(tag.attrs),
        name=get_attribute(tag, "name") or "",
        disabled=has_attribute(tag, "disabled"),
        multiple=has_attribute(tag, "multiple"),
        size=max(size, 0),
        options=[parse_option(option, tag) for option in tag.find_all("option")],
    )

    if not control.multiple:
        flagged = [option for option in control.options if option.selected]
        for option in flagged[:-1]:
            option.selected = False
        if not flagged and control.display_size == 1:
            for option in control.options:
                if not option.disabled:
                    option.selected = True
                    break
    return control


# --- CONSTRAINT RULES ---

@validity_spec(flags=["value_missing"])
def check_value_missing(control: SelectControl) -> ValidityResult:
    if not control.required:
        return []
    selected = control.selected_options
    if not selected:
        return ["value_missing"]
    if not control.multiple and control.display_size == 1 and control.options:
        placeholder = control.options[0]
        if placeholder.direct_child and placeholder.value == "" and len(selected) == 1 and selected[0] is placeholder:
            return ["value_missing"]
    return []


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="select",
    model=SelectControl,
    parser=parse_select,
    validity_rules=[check_value_missing]
)
