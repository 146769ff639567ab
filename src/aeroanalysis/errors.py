"""
Error Taxonomy
==============
Exceptions shared by the model, controller and view layers.

None of these are fatal: every one of them is recovered close to where it is
raised, so a bad or missing AI answer never takes the application down.
"""


class InvalidTransition(RuntimeError):
    """A lifecycle operation was requested in a state that does not allow it."""

    def __init__(self, operation: str, state: object) -> None:
        super().__init__(f"Cannot {operation} while simulation is {state}.")
        self.operation = operation
        self.state = state


class ServiceFailure(RuntimeError):
    """The text-generation service failed or returned an unusable answer."""


class ExportEmptyError(ValueError):
    """No quantitative fields were found, so there is nothing to export."""
