"""Form Registry for managing and accessing form definitions."""

import logging
from typing import Callable, Iterator

from form_engine.forms.base import FormDefinition

logger = logging.getLogger(__name__)

RegistrationListener = Callable[[FormDefinition], None]


class FormRegistry:
    """Central in-memory registry of form definitions.

    Registration is last-write-wins: registering an id that already exists
    replaces the earlier definition. Sessions keep their own snapshot, so a
    replacement only affects sessions created afterwards.
    """

    def __init__(self):
        self._forms: dict[str, FormDefinition] = {}
        self._listeners: list[RegistrationListener] = []

    def add_listener(self, listener: RegistrationListener) -> None:
        """Call ``listener`` with every definition registered from now on."""
        self._listeners.append(listener)

    def register(self, definition: FormDefinition) -> None:
        """Register a form definition, replacing any with the same id.

        Args:
            definition: The form definition to register
        """
        replaced = definition.id in self._forms
        self._forms[definition.id] = definition

        unsupported = definition.unsupported_keywords()
        if unsupported:
            logger.warning(
                "Form '%s' uses unsupported schema keywords %s; "
                "fields beneath them will not be asked as questions",
                definition.id,
                ", ".join(unsupported),
            )

        logger.debug(
            "%s form '%s'", "Replaced" if replaced else "Registered", definition.id
        )
        for listener in self._listeners:
            listener(definition)

    def get(self, form_id: str) -> FormDefinition | None:
        """Get a form definition by id.

        Returns:
            The definition or None if not registered
        """
        return self._forms.get(form_id)

    def list_all(self) -> list[FormDefinition]:
        """List all registered form definitions."""
        return list(self._forms.values())

    def list_ids(self) -> list[str]:
        """List all registered form ids."""
        return list(self._forms.keys())

    def unregister(self, form_id: str) -> bool:
        """Remove a form definition from the registry.

        Returns:
            True if something was removed, False otherwise
        """
        if form_id not in self._forms:
            return False
        del self._forms[form_id]
        return True

    def clear(self) -> None:
        """Clear all forms from the registry."""
        self._forms.clear()

    def __len__(self) -> int:
        return len(self._forms)

    def __iter__(self) -> Iterator[FormDefinition]:
        return iter(list(self._forms.values()))

    def __contains__(self, form_id: str) -> bool:
        return form_id in self._forms


_global_registry: FormRegistry | None = None


def get_global_registry() -> FormRegistry:
    """Get the global form registry singleton."""
    global _global_registry
    if _global_registry is None:
        _global_registry = FormRegistry()
    return _global_registry
