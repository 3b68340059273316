from __future__ import annotations


class EdsFixError(RuntimeError):
    pass


class DirectoryNotFound(EdsFixError):
    def __init__(self, path: str):
        super().__init__(f"Directory does not exist: {path}")
        self.path = path


class FileUnreadable(EdsFixError):
    """A single file could not be read. Scanners log and skip it."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Could not read file {path}: {reason}")
        self.path = path
        self.reason = reason


class UnknownTool(EdsFixError, KeyError):
    def __init__(self, name: str):
        EdsFixError.__init__(self, f"Unknown tool: {name}")
        self.name = name

    def __str__(self) -> str:
        return f"Unknown tool: {self.name}"


class InvalidArguments(EdsFixError, ValueError):
    def __init__(self, tool: str, problems: list[str]):
        super().__init__(f"Invalid arguments for {tool}: " + "; ".join(problems))
        self.tool = tool
        self.problems = problems


class GenerationFailure(EdsFixError):
    pass


class ConfigError(EdsFixError, ValueError):
    pass
