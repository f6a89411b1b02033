"""Forms module - definitions, ordering and registration.

Contains:
- FormDefinition: A named JSON Schema
- FormRegistry: In-memory id to definition mapping
- FormLoader: Reads definitions from YAML/JSON files
- derive_question_order: Schema to ordered field paths
"""

from form_engine.forms.base import FormBuilder, FormDefinition
from form_engine.forms.loader import FormLoader, load_forms
from form_engine.forms.ordering import derive_question_order, is_required, schema_for_path
from form_engine.forms.registry import FormRegistry, get_global_registry

__all__ = [
    "FormBuilder",
    "FormDefinition",
    "FormLoader",
    "FormRegistry",
    "derive_question_order",
    "get_global_registry",
    "is_required",
    "load_forms",
    "schema_for_path",
]
