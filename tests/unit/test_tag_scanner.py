"""
Unit tests for the parallel tag scanner.
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from tagsearch.errors import FileUnreadable
from tagsearch.models.config import ExtractionStrategy, TagsearchConfig
from tagsearch.tools.tag_extractor import RegexTagExtractor, ScanningTagExtractor
from tagsearch.tools.tag_scanner import ScanResult, TagScanner


class TestTagScanner:
    """Test cases for the TagScanner class."""
    
    def setup_method(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        self.scanner = TagScanner(max_workers=3)
        
        self.paths = []
        for i in range(20):
            path = self.root / f"note{i:02d}.md"
            path.write_text(f"@note/n{i} @common" if i % 4 else "no tags", encoding='utf-8')
            self.paths.append(str(path))
    
    def teardown_method(self):
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)
    
    def test_default_extractor(self):
        assert isinstance(TagScanner().extractor, RegexTagExtractor)
    
    def test_read_tags(self):
        assert self.scanner.read_tags(self.paths[1]) == {("note", "n1"), ("common",)}
        assert self.scanner.read_tags(self.paths[0]) == frozenset()
    
    def test_read_tags_missing_file(self):
        missing = self.root / "missing.md"
        with pytest.raises(FileUnreadable) as exc_info:
            self.scanner.read_tags(missing)
        assert exc_info.value.path == str(missing)
    
    def test_read_tags_strict_decoding(self):
        path = self.root / "latin1.txt"
        path.write_bytes(b"@caf\xe9 @ok")
        
        strict = TagScanner(encoding_errors='strict')
        with pytest.raises(FileUnreadable):
            strict.read_tags(path)
        
        assert TagScanner().read_tags(path) == {("caf",), ("ok",)}
    
    def test_scan_preserves_order(self):
        result = self.scanner.scan(self.paths)
        
        assert isinstance(result, ScanResult)
        assert result.files == self.paths
        assert not result.has_errors()
        assert result.tagsets[self.paths[5]] == {("note", "n5"), ("common",)}
    
    def test_scan_collects_unreadable(self):
        missing = str(self.root / "missing.md")
        result = self.scanner.scan([self.paths[1], missing, self.paths[2]])
        
        assert result.files == [self.paths[1], self.paths[2]]
        assert result.has_errors()
        assert [e.path for e in result.unreadable] == [missing]
    
    def test_scan_read_failure_does_not_block_others(self):
        """Test that an OSError on one file leaves the rest intact."""
        real_open = open
        
        def flaky_open(path, *args, **kwargs):
            if str(path) == self.paths[3]:
                raise PermissionError("denied")
            return real_open(path, *args, **kwargs)
        
        with patch("builtins.open", side_effect=flaky_open):
            result = self.scanner.scan(self.paths)
        
        assert len(result.files) == len(self.paths) - 1
        assert self.paths[3] not in result.tagsets
        assert "denied" in result.unreadable[0].reason
    
    def test_scan_empty(self):
        result = self.scanner.scan([])
        assert result.files == []
        assert result.unreadable == []
    
    def test_scan_accepts_paths(self):
        result = self.scanner.scan([Path(self.paths[1])])
        assert result.files == [self.paths[1]]
    
    def test_strategies_agree(self):
        regex = TagScanner(extractor=RegexTagExtractor()).scan(self.paths)
        scanner = TagScanner(extractor=ScanningTagExtractor()).scan(self.paths)
        assert regex.tagsets == scanner.tagsets
    
    def test_from_config(self):
        config = TagsearchConfig(
            roots=[self.temp_dir],
            limits={'max_workers': 2},
            extraction={'strategy': 'scanner', 'encoding_errors': 'strict'}
        )
        scanner = TagScanner.from_config(config)
        
        assert isinstance(scanner.extractor, ScanningTagExtractor)
        assert scanner.extractor.strategy == ExtractionStrategy.SCANNER
        assert scanner.max_workers == 2
        assert scanner.encoding_errors == 'strict'
