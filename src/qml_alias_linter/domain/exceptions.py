class ElementModelError(ValueError):
    """An element-model document could not be turned into an element tree."""

    def __init__(self, model_path: str, reason: str, location: str = "") -> None:
        self.model_path = model_path
        self.reason = reason
        self.location = location
        where = f" at {location}" if location else ""
        super().__init__(f"{model_path}{where}: {reason}")


class FixApplicationError(ValueError):
    """Fix edits could not be applied to the source text as a whole."""
