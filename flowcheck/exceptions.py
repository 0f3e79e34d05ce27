"""Custom exceptions for flowcheck."""


class FlowCheckError(Exception):
    """Base exception for flowcheck errors."""
    pass


class DirectiveError(FlowCheckError):
    """Raised when a known directive carries an invalid parameter payload."""
    def __init__(self, directive: str, message: str):
        super().__init__(f"Invalid directive '{directive}': {message}")
        self.directive = directive
        self.message = message


class JsonParseError(FlowCheckError):
    """Raised when a document handed to the engine is not valid JSON."""
    def __init__(self, message: str, line: int = None, column: int = None, reason: str = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column
        self.reason = reason


class TemplateError(JsonParseError):
    """Raised when a resolved request template is not valid JSON."""
    def __init__(self, template: str, reason: str, line: int = None, column: int = None):
        super().__init__(
            f"Malformed request template: {reason}",
            line=line,
            column=column,
            reason=reason
        )
        self.template = template


class UndefinedVariableError(FlowCheckError):
    """Raised when a template references a context variable that was never set."""
    def __init__(self, name: str):
        super().__init__(f"Undefined context variable: {name}")
        self.name = name


class UnknownGeneratorError(FlowCheckError):
    """Raised when a template calls a value generator that is not registered."""
    def __init__(self, name: str):
        super().__init__(f"Unknown value generator: {name}")
        self.name = name


class InvalidPathError(FlowCheckError):
    """Raised when a response path expression cannot be parsed."""
    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid path expression '{path}': {reason}")
        self.path = path
        self.reason = reason
