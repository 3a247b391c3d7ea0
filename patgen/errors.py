from __future__ import annotations
from pathlib import Path
from typing import Optional, Union

class PatgenError(Exception):
    pass

class MalformedDocument(PatgenError):

    def __init__(self, message: str, *, source: Optional[Union[str, Path]]=None) -> None:
        self.source = str(source) if source is not None else None
        if self.source:
            message = f'{message} ({self.source})'
        super().__init__(message)

class SchemaViolation(PatgenError):

    def __init__(self, message: str, *, element: Optional[str]=None) -> None:
        super().__init__(message)
        self.element = element

class VariableTypeConflict(PatgenError):

    def __init__(self, name: str, existing_type: Optional[str], incoming_type: Optional[str]) -> None:
        self.name = name
        self.existing_type = existing_type
        self.incoming_type = incoming_type
        super().__init__(f"Variable name clash with different type: {name} ({existing_type!r} vs {incoming_type!r})")

class EmptyInput(PatgenError):
    pass

class ResourceError(PatgenError):

    def __init__(self, message: str, *, path: Optional[Union[str, Path]]=None) -> None:
        super().__init__(message)
        self.path = str(path) if path is not None else None
_CLIENT_ERRORS = (MalformedDocument, SchemaViolation, VariableTypeConflict, EmptyInput)

def is_client_error(exc: BaseException) -> bool:
    return isinstance(exc, _CLIENT_ERRORS)
__all__ = ['PatgenError', 'MalformedDocument', 'SchemaViolation', 'VariableTypeConflict', 'EmptyInput', 'ResourceError', 'is_client_error']
