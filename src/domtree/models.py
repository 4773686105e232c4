# src/domtree/models.py
import logging
from typing import Any, Dict
from pydantic import BaseModel, Field

from .styles import parse_declarations, property_name

logger = logging.getLogger(__name__)


class StyleSpec(BaseModel):
    """
    Represents an expected set of style declarations.

    Values are literal strings or compiled patterns; property names are stored in their
    CSS form, so 'backgroundColor' and 'background-color' address the same property.
    """
    declarations: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def parse(cls, spec: Any) -> "StyleSpec":
        """
        Builds a spec from a mapping or from a declaration string such as
        'color: white; position: absolute'. Unrecognized fragments are skipped.
        """
        if isinstance(spec, StyleSpec):
            return spec
        if isinstance(spec, dict):
            return cls(declarations={property_name(str(key)): value for key, value in spec.items()})
        if isinstance(spec, str):
            return cls(declarations={prop: value for prop, value, _ in parse_declarations(spec)})
        logger.debug("Unsupported style spec of type %s, treating it as empty.", type(spec).__name__)
        return cls()
