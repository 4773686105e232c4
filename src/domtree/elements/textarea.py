from bs4 import Tag
from ..core import ControlBase, ElementDefinition, ValidityResult, validity_spec
from ..tree import get_attribute, has_attribute, text_content


class TextAreaControl(ControlBase):
    tag: str = "textarea"
    value: str = ""
    readonly: bool = False


def parse_textarea(tag: Tag) -> TextAreaControl:
    # The default value is the text content; a single leading newline belongs to the markup
    value = text_content(tag).replace("\r\n", "\n").replace("\r", "\n")
    if value.startswith("\n"):
        value = value[1:]
    return TextAreaControl(
        attrs=dict(tag.attrs),
        name=get_attribute(tag, "name") or "",
        disabled=has_attribute(tag, "disabled"),
        value=value,
        readonly=has_attribute(tag, "readonly"),
    )


# --- RULES ---

@validity_spec(flags=["value_missing"])
def check_value_missing(control: TextAreaControl) -> ValidityResult:
    return ["value_missing"] if control.required and control.value == "" else []


# --- DEFINITION ---
DEFINITION = ElementDefinition(
    tag_name="textarea",
    model=TextAreaControl,
    parser=parse_textarea,
    validity_rules=[check_value_missing]
)
