"""
Unit tests for the Filter and tag aggregation.

Tests file matching, tag unions, untagged files, tag counts and similarity
reporting over real files in a temporary directory.
"""

import os
import shutil
import tempfile
from pathlib import Path

import pytest

from tagsearch.models.filter_query import FilterQuery
from tagsearch.models.results import Issue
from tagsearch.tools.tag_filter import Filter, build_filter, count_tagsets
from tagsearch.tools.tag_scanner import TagScanner
from tagsearch.tools.tag_extractor import ScanningTagExtractor


class TestFilter:
    """Test cases for the Filter class."""
    
    def setup_method(self):
        """Set up test files."""
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)
        
        contents = {
            "stoic.md": "Quote of the day @philosophy/stoicism/quote\n@philosophy/mindset",
            "work.txt": "@work/projectA meeting with @alice",
            "both.org": "@work and @philosophy",
            "draft.md": "@work/projectA @draft",
            "plain.txt": "nothing to see here, mail x@example.com",
        }
        self.files = {}
        for name, text in contents.items():
            path = self.root / name
            path.write_text(text, encoding='utf-8')
            self.files[name] = str(path)
        
        self.all_files = [self.files[name] for name in ["stoic.md", "work.txt", "both.org", "draft.md", "plain.txt"]]
    
    def teardown_method(self):
        """Clean up test files."""
        if os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir)
    
    def test_files_matching_and(self):
        f = build_filter(good=["work", "projectA"])
        assert f.files_matching(self.all_files) == [self.files["work.txt"], self.files["draft.md"]]
    
    def test_files_matching_or(self):
        f = build_filter(good=["alice", "draft"], or_mode=True)
        assert f.files_matching(self.all_files) == [self.files["work.txt"], self.files["draft.md"]]
    
    def test_files_matching_veto(self):
        f = build_filter(good=["work"], bad=["draft"])
        assert f.files_matching(self.all_files) == [
            self.files["work.txt"],
            self.files["both.org"],
        ]
    
    def test_files_matching_preserves_input_order(self):
        f = build_filter(good=["work"])
        reordered = list(reversed(self.all_files))
        assert f.files_matching(reordered) == [
            self.files["draft.md"],
            self.files["both.org"],
            self.files["work.txt"],
        ]
    
    def test_empty_query_matches_all(self):
        f = build_filter()
        assert f.files_matching(self.all_files) == self.all_files
    
    def test_fuzzy(self):
        f = build_filter(good=["stoic"], fuzzy=True)
        assert f.files_matching(self.all_files) == [self.files["stoic.md"]]
    
    def test_tags_matching(self):
        f = build_filter(good=["philosophy"])
        assert f.tags_matching(self.all_files) == {
            ("philosophy", "stoicism", "quote"),
            ("philosophy", "mindset"),
            ("work",),
            ("philosophy",),
        }
    
    def test_untagged(self):
        f = build_filter(good=["ignored"])
        assert f.untagged(self.all_files) == [self.files["plain.txt"]]
    
    def test_matches(self):
        f = build_filter(good=["a"])
        assert f.matches(frozenset({("a",)}))
        assert not f.matches(frozenset({("b",)}))
    
    def test_count_of_tags(self):
        """Test counting segments and joined paths across files."""
        f = build_filter(good=["unrelated"])
        counts = f.count_of_tags(self.all_files)
        
        assert counts[:2] == [(3, "philosophy"), (3, "work")]
        assert dict((key, count) for count, key in counts) == {
            "philosophy": 3,
            "stoicism": 1,
            "quote": 1,
            "philosophy/stoicism/quote": 1,
            "mindset": 1,
            "philosophy/mindset": 1,
            "work": 3,
            "projectA": 2,
            "work/projectA": 2,
            "alice": 1,
            "draft": 1,
        }
    
    def test_count_of_tags_order(self):
        """Test count descending with ties broken by key."""
        f = build_filter()
        counts = f.count_of_tags(self.all_files)
        
        assert counts == sorted(counts, key=lambda pair: (-pair[0], pair[1]))
        ones = [key for count, key in counts if count == 1]
        assert ones == sorted(ones)
    
    def test_count_of_tags_permutation_invariant(self):
        f = build_filter()
        assert f.count_of_tags(self.all_files) == f.count_of_tags(list(reversed(self.all_files)))
    
    def test_similar_tags_uses_all_files(self):
        (self.root / "more.md").write_text("@Work @drafts", encoding='utf-8')
        files = self.all_files + [str(self.root / "more.md")]
        f = build_filter(good=["philosophy"])
        
        assert f.similar_tags(files) == [
            Issue.case("Work", "work"),
            Issue.plural("draft", "drafts"),
        ]
    
    def test_unreadable_file_skipped(self):
        """Test that a missing file does not stop the others."""
        missing = str(self.root / "missing.md")
        f = build_filter(good=["work"])
        
        assert f.files_matching([missing] + self.all_files) == [
            self.files["work.txt"],
            self.files["both.org"],
            self.files["draft.md"],
        ]
        assert f.untagged([missing]) == []
        
        scan = f.scan([missing, self.files["work.txt"]])
        assert [e.path for e in scan.unreadable] == [missing]
        assert scan.files == [self.files["work.txt"]]
    
    def test_operations_accept_scan_result(self):
        f = build_filter(good=["work"])
        scan = f.scan(self.all_files)
        
        assert f.files_matching(scan) == f.files_matching(self.all_files)
        assert f.tags_matching(scan) == f.tags_matching(self.all_files)
        assert f.count_of_tags(scan) == f.count_of_tags(self.all_files)
    
    def test_scanner_strategy(self):
        scanner = TagScanner(extractor=ScanningTagExtractor(), max_workers=2)
        f = Filter(FilterQuery(good=["work"]), scanner)
        assert f.files_matching(self.all_files) == build_filter(good=["work"]).files_matching(self.all_files)


class TestCountTagsets:
    """Test cases for tag count aggregation."""
    
    def test_depth_three_tag(self):
        counts = count_tagsets([frozenset({("a", "b", "c")})])
        assert counts == {"a": 1, "b": 1, "c": 1, "a/b/c": 1}
    
    def test_flat_tag_not_doubled(self):
        counts = count_tagsets([frozenset({("a",)}), frozenset({("a",), ("a", "b")})])
        assert counts == {"a": 3, "b": 1, "a/b": 1}
    
    def test_empty(self):
        assert count_tagsets([]) == {}
