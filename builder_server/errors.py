"""
Errors

Exceptional conditions raised by the builder core. Data-shape problems
inside the tree and template engines never raise; only these do.
"""


class BuilderError(Exception):
    """Base class for page builder errors."""


class UnknownComponentTypeError(BuilderError, ValueError):
    """Factory asked for a component type that is not registered."""

    def __init__(self, component_type):
        self.component_type = component_type
        super().__init__(f"Unknown component type: {component_type}")


class UnknownTemplateError(BuilderError, ValueError):
    """Requested block template does not exist."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Unknown template: {template_id}")


class DragInProgressError(BuilderError, RuntimeError):
    """A drag was started while another one is still open."""


class ExportParseError(BuilderError, ValueError):
    """Exported page JSON could not be understood."""
