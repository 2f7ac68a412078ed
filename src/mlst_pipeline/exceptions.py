"""Custom exceptions for MLST pipeline."""

from typing import Optional, Sequence


class PipelineError(Exception):
    """Base exception for all pipeline errors."""
    pass


class FormatError(PipelineError):
    """Exception raised for malformed input data.

    Covers reference sequence lines, allele identifiers, ST table lines and
    conflicting duplicate ST definitions. Always fatal for the run.
    """
    
    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None
    ):
        self.file_path = file_path
        self.line_number = line_number
        self.line_content = line_content
        
        if line_number is not None:
            message = f"Line {line_number}: {message}"
        if file_path is not None:
            message = f"{file_path}: {message}"
        if line_content is not None:
            message = f"{message} (content: {line_content[:50]})"
            
        super().__init__(message)


class AmbiguityError(PipelineError):
    """Exception raised when a lookup has more than one answer where exactly one is allowed."""
    
    def __init__(
        self,
        message: str,
        locus: Optional[str] = None,
        candidates: Optional[Sequence] = None
    ):
        self.locus = locus
        self.candidates = list(candidates) if candidates is not None else []
        
        if locus is not None:
            message = f"Locus {locus}: {message}"
        if self.candidates:
            message = f"{message} (candidates: {', '.join(str(c) for c in self.candidates)})"
            
        super().__init__(message)


class ConfigurationError(PipelineError):
    """Exception raised for configuration errors."""
    
    def __init__(
        self,
        message: str,
        config_file: Optional[str] = None,
        parameter: Optional[str] = None,
        line_number: Optional[int] = None
    ):
        self.config_file = config_file
        self.parameter = parameter
        self.line_number = line_number
        
        if line_number is not None:
            message = f"line {line_number}: {message}"
        if config_file is not None:
            message = f"Configuration error in {config_file}: {message}"
        if parameter is not None:
            message = f"{message} (parameter: {parameter})"
            
        super().__init__(message)
