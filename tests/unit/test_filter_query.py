"""
Unit tests for the FilterQuery data model.
"""

import pytest
from pydantic import ValidationError

from tagsearch.models.filter_query import FilterQuery


class TestFilterQuery:
    """Test cases for FilterQuery construction."""
    
    def test_basic_query_creation(self):
        """Test creating a basic query."""
        query = FilterQuery(good=["a", "b"], bad=["x"])
        
        assert query.good == frozenset({"a", "b"})
        assert query.bad == frozenset({"x"})
        assert query.or_filter is False
        assert query.fuzzy is False
        assert query.required_matches == 2
        assert query.has_keywords()
    
    def test_empty_query(self):
        """Test that an empty AND query has a zero threshold."""
        query = FilterQuery()
        
        assert query.required_matches == 0
        assert not query.has_keywords()
    
    def test_or_threshold(self):
        """Test that OR mode needs a single match."""
        query = FilterQuery(good=["a", "b", "c"], or_filter=True)
        assert query.required_matches == 1
    
    def test_keyword_normalization(self):
        """Test that keywords are stripped and blanks dropped."""
        query = FilterQuery(good=[" a ", "", "  "], bad="x")
        
        assert query.good == frozenset({"a"})
        assert query.bad == frozenset({"x"})
    
    def test_query_is_immutable(self):
        """Test that a query cannot be changed after construction."""
        query = FilterQuery(good=["a"])
        
        with pytest.raises(ValidationError):
            query.good = frozenset({"b"})
        with pytest.raises(ValidationError):
            query.or_filter = True
        assert query.required_matches == 1
    
    def test_from_keywords(self):
        """Test '!' prefixed keywords becoming bad keywords."""
        query = FilterQuery.from_keywords(["a", "!b", "c"], not_keywords=["d"], or_filter=True, fuzzy=True)
        
        assert query.good == frozenset({"a", "c"})
        assert query.bad == frozenset({"b", "d"})
        assert query.or_filter is True
        assert query.fuzzy is True
    
    def test_from_keywords_bare_negation(self):
        """Test that a lone '!' adds nothing."""
        query = FilterQuery.from_keywords(["!"])
        assert not query.has_keywords()
    
    def test_serialization(self):
        """Test dictionary round trip."""
        query = FilterQuery(good=["b", "a"], bad=["x"], fuzzy=True)
        data = query.to_dict()
        
        assert data == {'good': ['a', 'b'], 'bad': ['x'], 'or_filter': False, 'fuzzy': True}
        assert FilterQuery.from_dict(data) == query
    
    def test_string_representation(self):
        query = FilterQuery(good=["a"], or_filter=True, fuzzy=True)
        assert str(query) == "Good: a | Bad: - | Mode: ANY | Fuzzy"


class TestFilterQueryMatches:
    """Test cases for matching tagsets."""
    
    def test_and_mode(self):
        """Test that AND mode needs every good keyword."""
        query = FilterQuery(good=["a", "b"])
        
        assert query.matches(frozenset({("a",), ("b",)}))
        assert not query.matches(frozenset({("a",)}))
    
    def test_or_mode(self):
        """Test that OR mode needs any good keyword."""
        query = FilterQuery(good=["a", "b"], or_filter=True)
        
        assert query.matches(frozenset({("a",)}))
        assert not query.matches(frozenset({("c",)}))
    
    def test_empty_good_matches_everything(self):
        """Test that no good keywords in AND mode matches all tagsets."""
        query = FilterQuery()
        
        assert query.matches(frozenset())
        assert query.matches(frozenset({("anything",)}))
    
    def test_empty_good_or_mode(self):
        """Test that OR mode still requires one match."""
        query = FilterQuery(or_filter=True)
        assert not query.matches(frozenset({("anything",)}))
    
    def test_veto(self):
        """Test that a bad keyword rejects regardless of good matches."""
        query = FilterQuery(good=["a"], bad=["x"], or_filter=True)
        
        assert not query.matches(frozenset({("a",), ("x",)}))
        assert not query.matches(frozenset({("a", "x")}))
        assert query.matches(frozenset({("a",), ("y",)}))
    
    def test_veto_without_good_keywords(self):
        query = FilterQuery(bad=["x"])
        
        assert query.matches(frozenset({("a",)}))
        assert not query.matches(frozenset({("x",)}))
    
    def test_bad_wins_on_overlap(self):
        query = FilterQuery(good=["a"], bad=["a"])
        assert not query.matches(frozenset({("a",)}))
    
    def test_case_insensitive_exact(self):
        """Test exact mode ignores case but not partial words."""
        query = FilterQuery(good=["Work"])
        
        assert query.matches(frozenset({("work",)}))
        assert query.matches(frozenset({("WORK", "projectA")}))
        assert not query.matches(frozenset({("workshop",)}))
    
    def test_nested_segments_and_path(self):
        """Test matching any segment or the joined path of a nested tag."""
        assert FilterQuery(good=["projectA"]).matches(frozenset({("work", "projectA")}))
        assert FilterQuery(good=["work/projecta"]).matches(frozenset({("work", "projectA")}))
        assert not FilterQuery(good=["work/projecta"]).matches(frozenset({("work",), ("projectA",)}))
    
    def test_fuzzy(self):
        """Test substring matching in fuzzy mode."""
        query = FilterQuery(good=["stoic"], fuzzy=True)
        
        assert query.matches(frozenset({("stoicism",)}))
        assert query.matches(frozenset({("philosophy", "Stoicism")}))
        assert not query.matches(frozenset({("stoa",)}))
    
    def test_fuzzy_veto(self):
        query = FilterQuery(good=["work"], bad=["draft"], fuzzy=True)
        assert not query.matches(frozenset({("work",), ("drafts",)}))
    
    def test_exact_does_not_substring(self):
        query = FilterQuery(good=["stoic"])
        assert not query.matches(frozenset({("stoicism",)}))
