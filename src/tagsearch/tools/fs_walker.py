"""
Filesystem walker for tagsearch.

This module discovers the candidate files to scan for tags: every file under
the configured roots whose extension is on the allow-list, minus ignored
paths and files over the size limit.
"""

import os
from pathlib import Path
from typing import Dict, List, Optional, Iterator, Sequence
import logging

from ..errors import FileDiscoveryError
from ..models.config import TagsearchConfig, DEFAULT_EXTENSIONS


logger = logging.getLogger(__name__)


class FSWalker:
    """
    Filesystem walker that collects candidate files under root directories.
    
    This class provides directory traversal with support for:
    - An extension allow-list (.txt, .md and .org by default)
    - Ignore patterns for files and directories
    - File count and file size limits
    """
    
    def __init__(self, config: TagsearchConfig):
        """
        Initialize the filesystem walker.
        
        Args:
            config: Configuration object containing roots, extensions, ignore patterns and limits
        """
        self.config = config
        self._stats = self._empty_stats()
    
    @staticmethod
    def _empty_stats() -> Dict[str, int]:
        return {
            'files_scanned': 0,
            'files_matched': 0,
            'directories_traversed': 0,
            'files_ignored': 0,
            'errors': 0
        }
    
    def find_files(self, roots: Optional[Sequence[str]] = None) -> List[str]:
        """
        Collect all candidate files under the roots.
        
        Args:
            roots: Root directories (configured roots if None)
            
        Returns:
            Sorted, deduplicated list of file paths
            
        Raises:
            FileDiscoveryError: If a root does not exist or is not a directory
        """
        return sorted(set(self.walk_paths(roots)))
    
    def walk_paths(self, roots: Optional[Sequence[str]] = None) -> Iterator[str]:
        """
        Walk through root directories and yield candidate files.
        
        Every root is checked before any is walked. At most
        ``limits.max_files`` files are yielded across all roots together.
        
        Args:
            roots: Root directory paths to search (configured roots if None)
            
        Yields:
            Paths of files with an allowed extension
            
        Raises:
            FileDiscoveryError: If a root does not exist or is not a directory
        """
        root_paths = [self._check_root(root) for root in (roots if roots is not None else self.config.roots)]
        remaining = self.config.limits.max_files
        
        for root_path in root_paths:
            logger.info(f"Walking directory tree: {root_path}")
            for file_path in self._walk_directory(root_path):
                yield file_path
                remaining -= 1
                if remaining == 0:
                    logger.warning(f"Reached maximum file limit: {self.config.limits.max_files}")
                    return
    
    @staticmethod
    def _check_root(root: str) -> Path:
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise FileDiscoveryError(f"Root directory does not exist: {root_path}")
        if not root_path.is_dir():
            raise FileDiscoveryError(f"Root path is not a directory: {root_path}")
        return root_path
    
    def _walk_directory(self, root_path: Path) -> Iterator[str]:
        """
        Walk a single directory tree.
        
        Args:
            root_path: Root directory to walk
            
        Yields:
            Accepted file paths
        """
        for current_dir, subdirs, files in os.walk(root_path, onerror=self._on_walk_error):
            current_path = Path(current_dir)
            self._stats['directories_traversed'] += 1
            
            # Prune ignored directories so os.walk never enters them
            subdirs[:] = sorted(d for d in subdirs if not self._should_ignore(root_path, current_path / d))
            
            for filename in sorted(files):
                file_path = current_path / filename
                
                if self._should_ignore(root_path, file_path):
                    self._stats['files_ignored'] += 1
                    continue
                
                self._stats['files_scanned'] += 1
                
                if self.config.has_allowed_extension(filename) and self._within_size_limit(file_path):
                    self._stats['files_matched'] += 1
                    yield str(file_path)
    
    def _on_walk_error(self, error: OSError) -> None:
        logger.warning(f"Error walking directory {error.filename}: {error}")
        self._stats['errors'] += 1
    
    def _should_ignore(self, root_path: Path, path: Path) -> bool:
        """
        Check if a file or directory should be ignored.
        
        Args:
            root_path: Root the path was found under
            path: Path to check
            
        Returns:
            True if the path should be ignored
        """
        if not self.config.ignore:
            return False
        
        try:
            relative = path.relative_to(root_path)
        except ValueError:
            relative = path
        
        return self.config.should_ignore(relative.as_posix())
    
    def _within_size_limit(self, file_path: Path) -> bool:
        """Check the file size limit; unstattable files are left for the reader to report."""
        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.debug(f"Cannot stat {file_path}: {e}")
            return True
        
        if size > self.config.limits.max_bytes_per_file:
            logger.debug(
                f"Skipping large file: {file_path} ({size} bytes, "
                f"limit {self.config.limits.get_max_size_human_readable()})"
            )
            return False
        return True
    
    def get_stats(self) -> Dict[str, int]:
        """
        Get statistics about the filesystem walking operation.
        
        Returns:
            Dictionary containing operation statistics
        """
        return self._stats.copy()
    
    def reset_stats(self) -> None:
        """Reset the statistics counters."""
        self._stats = self._empty_stats()


def discover_files(roots: Sequence[str], extensions: Optional[Sequence[str]] = None) -> List[str]:
    """
    Convenience function to find candidate files under roots.
    
    Args:
        roots: Root directories to search
        extensions: Allowed extensions (.txt, .md, .org if None)
        
    Returns:
        Sorted list of file paths
        
    Raises:
        FileDiscoveryError: If a root cannot be walked
    """
    config = TagsearchConfig(roots=list(roots), extensions=list(extensions or DEFAULT_EXTENSIONS))
    return FSWalker(config).find_files()
