"""
Configuration data models for tagsearch.

This module defines the data structures for managing application configuration,
including root directories, the file extension allow-list, ignore patterns,
tag extraction settings and processing limits.
"""

from typing import Dict, List, Any
from pathlib import Path, PurePosixPath
from enum import Enum
import fnmatch
from pydantic import BaseModel, Field, field_validator


DEFAULT_EXTENSIONS = ['.txt', '.md', '.org']


class ExtractionStrategy(Enum):
    """Supported tag extraction strategies."""
    REGEX = "regex"
    SCANNER = "scanner"


class LimitsConfig(BaseModel):
    """
    Configuration for system limits and constraints.
    
    Attributes:
        max_files: Maximum number of files to process
        max_bytes_per_file: Maximum file size to process (bytes)
        max_workers: Maximum worker threads for reading and extraction
    """
    
    max_files: int = Field(200000, gt=0, description="Maximum number of files to process")
    max_bytes_per_file: int = Field(5000000, gt=0, description="Maximum file size to process (bytes)")
    max_workers: int = Field(4, gt=0, description="Maximum worker threads")
    
    def get_max_size_human_readable(self) -> str:
        """Get max file size in human-readable format."""
        size = float(self.max_bytes_per_file)
        for unit in ['B', 'KB', 'MB', 'GB']:
            if size < 1024.0:
                return f"{size:.1f} {unit}"
            size /= 1024.0
        return f"{size:.1f} TB"
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class ExtractionConfig(BaseModel):
    """
    Configuration for reading files and extracting tags.
    
    Attributes:
        strategy: Which tag extractor to use
        encoding: Text encoding used to read files
        encoding_errors: How undecodable bytes are handled ('strict', 'replace', ...)
    """
    
    strategy: ExtractionStrategy = Field(ExtractionStrategy.REGEX, description="Tag extraction strategy")
    encoding: str = Field("utf-8", description="Text encoding used to read files")
    encoding_errors: str = Field("replace", description="Handling of undecodable bytes")
    
    @field_validator('strategy', mode='before')
    @classmethod
    def validate_strategy(cls, v) -> ExtractionStrategy:
        """Validate and convert strategy to enum."""
        if isinstance(v, str):
            try:
                return ExtractionStrategy(v.lower())
            except ValueError:
                raise ValueError(f"Invalid extraction strategy: {v}")
        return v
    
    @field_validator('encoding_errors')
    @classmethod
    def validate_encoding_errors(cls, v: str) -> str:
        valid = {'strict', 'replace', 'ignore', 'backslashreplace', 'surrogateescape'}
        if v not in valid:
            raise ValueError(f"Invalid encoding error handler: {v}")
        return v
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        data = self.model_dump()
        data['strategy'] = self.strategy.value
        return data


class OutputConfig(BaseModel):
    """
    Configuration for console output.
    
    Attributes:
        long_list: Print tag lists one per line instead of comma separated
        vim: Print file lists in vim quickfix format
    """
    
    long_list: bool = Field(False, description="One tag per line")
    vim: bool = Field(False, description="Vim quickfix output")
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class TagsearchConfig(BaseModel):
    """
    Main configuration class for tagsearch.
    
    Attributes:
        roots: Root directories to search for tagged files
        extensions: File extensions allowed as candidates
        ignore: Ignore patterns (fnmatch-style)
        limits: System limits and constraints
        extraction: Tag extraction settings
        output: Output formatting configuration
    """
    
    roots: List[str] = Field(default_factory=lambda: ['.'], min_length=1, description="Root directories to search")
    extensions: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSIONS),
        min_length=1,
        description="File extensions to consider"
    )
    ignore: List[str] = Field(
        default_factory=lambda: [
            ".git",
            ".hg",
            ".svn",
            "node_modules",
            "__pycache__",
            ".venv",
            "venv",
        ],
        description="Ignore patterns (fnmatch-style)"
    )
    limits: LimitsConfig = Field(default_factory=LimitsConfig, description="System limits and constraints")
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig, description="Tag extraction settings")
    output: OutputConfig = Field(default_factory=OutputConfig, description="Output formatting configuration")
    
    @field_validator('roots')
    @classmethod
    def validate_roots(cls, v: List[str]) -> List[str]:
        """Expand user paths and drop blank roots."""
        normalized_roots = []
        for root in v:
            if not root or not root.strip():
                continue
            normalized_roots.append(str(Path(root.strip()).expanduser()))
        
        if not normalized_roots:
            raise ValueError("No valid root directories provided")
        
        return normalized_roots
    
    @field_validator('extensions', mode='before')
    @classmethod
    def validate_extensions(cls, v) -> List[str]:
        """Normalize extensions to lowercase with a leading dot."""
        if isinstance(v, str):
            v = [v]
        
        normalized_exts = []
        for ext in v:
            ext = str(ext).strip().lower()
            if not ext:
                continue
            if not ext.startswith('.'):
                ext = '.' + ext
            if ext not in normalized_exts:
                normalized_exts.append(ext)
        
        if not normalized_exts:
            raise ValueError("At least one file extension must be specified")
        
        return normalized_exts
    
    @field_validator('ignore')
    @classmethod
    def validate_ignore(cls, v: List[str]) -> List[str]:
        """Strip patterns and skip blanks and comments."""
        normalized_patterns = []
        for pattern in v:
            if not pattern or not pattern.strip():
                continue
            pattern = pattern.strip()
            if pattern.startswith('#'):
                continue
            normalized_patterns.append(pattern.rstrip('/'))
        return normalized_patterns
    
    def should_ignore(self, relative_path: str) -> bool:
        """
        Check if a root-relative path should be ignored.
        
        A pattern containing '/' is matched against the whole relative path;
        any other pattern is matched against each path component.
        
        Args:
            relative_path: Path relative to its search root
            
        Returns:
            True if the path should be ignored
        """
        posix_path = PurePosixPath(relative_path.replace('\\', '/'))
        path_str = str(posix_path)
        
        for pattern in self.ignore:
            if '/' in pattern:
                if fnmatch.fnmatchcase(path_str, pattern.lstrip('/')):
                    return True
            elif any(fnmatch.fnmatchcase(part, pattern) for part in posix_path.parts):
                return True
        
        return False
    
    def has_allowed_extension(self, path: str) -> bool:
        """Check if a file has one of the allowed extensions."""
        return Path(path).suffix.lower() in self.extensions
    
    def validate_configuration(self) -> List[str]:
        """
        Check the configuration for non-fatal problems.
        
        Returns:
            List of warning messages
        """
        warnings = []
        
        for root in self.roots:
            root_path = Path(root)
            if not root_path.exists():
                warnings.append(f"Root directory does not exist: {root}")
            elif not root_path.is_dir():
                warnings.append(f"Root path is not a directory: {root}")
        
        if len(self.roots) > 10:
            warnings.append(f"Large number of root directories ({len(self.roots)}) may impact performance")
        
        if self.limits.max_files > 1000000:
            warnings.append("Very high max_files limit may cause memory issues")
        
        if self.limits.max_bytes_per_file > 50000000:  # 50MB
            warnings.append("Very high max_bytes_per_file limit may cause memory issues")
        
        unusual = [ext for ext in self.extensions if ext not in DEFAULT_EXTENSIONS]
        if unusual:
            warnings.append(f"Non-plaintext extensions configured: {', '.join(unusual)}")
        
        return warnings
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary representation."""
        data = self.model_dump()
        data['limits'] = self.limits.to_dict()
        data['extraction'] = self.extraction.to_dict()
        data['output'] = self.output.to_dict()
        return data
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TagsearchConfig':
        """Create configuration from dictionary representation."""
        return cls.model_validate(data)
    
    def __str__(self) -> str:
        """String representation of the configuration."""
        parts = [f"Roots: {len(self.roots)} directories"]
        parts.append(f"Extensions: {', '.join(self.extensions)}")
        parts.append(f"Ignore patterns: {len(self.ignore)}")
        parts.append(f"Strategy: {self.extraction.strategy.value}")
        parts.append(f"Workers: {self.limits.max_workers}")
        
        return " | ".join(parts)
