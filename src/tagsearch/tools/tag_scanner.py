"""
Parallel tag scanning of files.

This module reads candidate files and extracts their tags on a thread pool.
A file that cannot be read is logged and recorded without affecting the
others.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from ..errors import FileUnreadable
from ..models.config import ExtractionStrategy, TagsearchConfig
from ..models.tags import Tagset
from .tag_extractor import TagExtractor, create_extractor


logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """
    Result of scanning a list of files.
    
    Attributes:
        tagsets: Tagset of every readable file, in input order
        unreadable: Errors for the files that could not be read
    """
    tagsets: Dict[str, Tagset] = field(default_factory=dict)
    unreadable: List[FileUnreadable] = field(default_factory=list)
    
    @property
    def files(self) -> List[str]:
        return list(self.tagsets)
    
    def has_errors(self) -> bool:
        return bool(self.unreadable)


class TagScanner:
    """
    Reads files and extracts their tagsets on a thread pool.
    
    The extractor is shared read-only by all workers. Results are gathered
    in input order, so scheduling never changes the outcome.
    """
    
    def __init__(
        self,
        extractor: Optional[TagExtractor] = None,
        max_workers: int = 4,
        encoding: str = 'utf-8',
        encoding_errors: str = 'replace',
    ):
        """
        Initialize the scanner.
        
        Args:
            extractor: Tag extractor to use (regex extractor if None)
            max_workers: Number of worker threads
            encoding: Text encoding used to read files
            encoding_errors: Handling of undecodable bytes
        """
        self.extractor = extractor or create_extractor(ExtractionStrategy.REGEX)
        self.max_workers = max(1, max_workers)
        self.encoding = encoding
        self.encoding_errors = encoding_errors
    
    @classmethod
    def from_config(cls, config: TagsearchConfig) -> 'TagScanner':
        """Create a scanner from the extraction and limits configuration."""
        return cls(
            extractor=create_extractor(config.extraction.strategy),
            max_workers=config.limits.max_workers,
            encoding=config.extraction.encoding,
            encoding_errors=config.extraction.encoding_errors,
        )
    
    def read_tags(self, path: Union[str, Path]) -> Tagset:
        """
        Read one file and extract its tags.
        
        Args:
            path: File to read
            
        Returns:
            Tagset of the file
            
        Raises:
            FileUnreadable: If the file cannot be opened, read or decoded
        """
        try:
            with open(path, 'r', encoding=self.encoding, errors=self.encoding_errors) as f:
                contents = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileUnreadable(path, str(e)) from e
        
        tags = self.extractor.extract(contents)
        logger.debug(f"Found {len(tags)} tags in {path}")
        return tags
    
    def _read_one(self, path: str) -> Tuple[str, Optional[Tagset], Optional[FileUnreadable]]:
        try:
            return path, self.read_tags(path), None
        except FileUnreadable as e:
            return path, None, e
    
    def scan(self, files: Sequence[Union[str, Path]]) -> ScanResult:
        """
        Scan a list of files for tags.
        
        Args:
            files: Files to scan
            
        Returns:
            ScanResult with tagsets in input order and any unreadable files
        """
        result = ScanResult()
        paths = [str(f) for f in files]
        if not paths:
            return result
        
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for path, tags, error in executor.map(self._read_one, paths):
                if error is not None:
                    logger.warning(f"Skipping unreadable file: {error}")
                    result.unreadable.append(error)
                else:
                    result.tagsets[path] = tags
        
        logger.info(f"Scanned {len(result.tagsets)} files ({len(result.unreadable)} unreadable)")
        return result
