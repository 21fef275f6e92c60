"""
Unit tests for DuplicateReconciler class.
"""

from unittest.mock import Mock
import pytest
from transcript_reconciler.models import DetectionType, ReconcilerConfig
from transcript_reconciler.services.duplicate_reconciler import DuplicateReconciler


class TestAnalyze:
    """Test suite for duplicate/expansion classification."""

    @pytest.fixture
    def seeded(self, reconciler):
        reconciler.mark_processed('the weather is nice')
        return reconciler

    def test_expansion_of_cached_text(self, seeded):
        """Test that a longer text containing a cached one is an expansion."""
        result = seeded.analyze('the weather is nice today')

        assert result.detection_type == DetectionType.EXPANSION
        assert result.previous_text == 'the weather is nice'
        assert result.similarity == pytest.approx(0.8)
        assert result.expansion_ratio == pytest.approx(25 / 19)
        assert result.should_process is True

    def test_fragment_of_cached_text_is_subset_duplicate(self, seeded):
        """Test that a fragment of a cached text is dropped."""
        result = seeded.analyze('weather is nice')

        assert result.detection_type == DetectionType.SUBSET_DUPLICATE
        assert result.is_duplicate is True

    def test_unrelated_text_is_new_content(self, seeded):
        """Test that unrelated text is new content."""
        result = seeded.analyze('completely different text')

        assert result.detection_type == DetectionType.NEW_CONTENT
        assert result.should_process is True

    def test_exact_duplicate_ignores_case_and_whitespace(self, seeded):
        """Test normalization before the exact match."""
        result = seeded.analyze('  The Weather Is Nice ')

        assert result.detection_type == DetectionType.EXACT_DUPLICATE
        assert result.similarity == 1.0

    def test_reordered_words_are_similar_duplicate(self, seeded):
        """Test that identical word sets of equal length are near-duplicates."""
        result = seeded.analyze('nice is weather the')

        assert result.detection_type == DetectionType.SIMILAR_DUPLICATE
        assert result.similarity == pytest.approx(1.0)

    def test_growth_below_expansion_ratio_is_not_expansion(self, reconciler):
        """Test that one extra character does not count as an expansion."""
        reconciler.mark_processed('hello world')

        result = reconciler.analyze('hello world!')

        assert result.detection_type == DetectionType.NEW_CONTENT

    def test_best_expansion_is_selected(self, reconciler):
        """Test that the most similar contained text is the one superseded."""
        reconciler.mark_processed('the cat')
        reconciler.mark_processed('the cat sat on')

        result = reconciler.analyze('the cat sat on the mat')

        assert result.detection_type == DetectionType.EXPANSION
        assert result.previous_text == 'the cat sat on'
        assert result.similarity == pytest.approx(0.8)

    def test_subset_wins_over_expansion(self, reconciler):
        """Test that a subset match short-circuits the scan."""
        reconciler.mark_processed('good')
        reconciler.mark_processed('good morning everyone')

        result = reconciler.analyze('good morning')

        assert result.detection_type == DetectionType.SUBSET_DUPLICATE

    def test_text_outside_length_bounds_is_not_compared(self):
        """Test that texts outside the configured range pass through."""
        reconciler = DuplicateReconciler(config=ReconcilerConfig(max_text_length=10))
        reconciler.mark_processed('this is a long sentence')

        result = reconciler.analyze('this is a long sentence')

        assert result.detection_type == DetectionType.NEW_CONTENT

    def test_empty_text_is_new_content(self, reconciler):
        """Test that empty text is passed through without analysis."""
        assert reconciler.analyze('').detection_type == DetectionType.NEW_CONTENT

    def test_empty_cache_is_new_content(self, reconciler):
        """Test that anything is new against an empty cache."""
        assert reconciler.analyze('hello').detection_type == DetectionType.NEW_CONTENT


class TestCacheManagement:
    """Test suite for cache insertion, removal and eviction."""

    def test_mark_processed_normalizes(self, reconciler):
        """Test that cache keys are normalized and originals kept."""
        reconciler.mark_processed('  Hello There. ')

        assert reconciler.seen == {'hello there.'}
        assert reconciler.original_text('hello there.') == 'Hello There.'
        assert reconciler.is_text_in_cache('HELLO THERE.') is True

    def test_mark_processed_ignores_empty_text(self, reconciler):
        """Test that empty text is not cached."""
        reconciler.mark_processed('   ')

        assert reconciler.size() == 0

    def test_mark_processed_skips_texts_outside_length_bounds(self):
        """Test that texts analysis passes through are not cached either."""
        reconciler = DuplicateReconciler(
            config=ReconcilerConfig(min_text_length=3, max_text_length=20),
            session_id='test-session-456'
        )

        reconciler.mark_processed('Hi')
        reconciler.mark_processed('This sentence is far too long to compare.')
        reconciler.mark_processed('Just right.')

        assert reconciler.seen == {'just right.'}

    def test_cache_clears_when_ceiling_exceeded(self):
        """Test the full-clear eviction policy."""
        metrics = Mock()
        reconciler = DuplicateReconciler(
            config=ReconcilerConfig(max_cache_size=50),
            session_id='test-session-456',
            metrics=metrics
        )

        for i in range(50):
            reconciler.mark_processed(f'sentence number {i}')

        assert reconciler.size() == 50
        metrics.emit_cache_cleared.assert_not_called()

        reconciler.mark_processed('sentence number 50')

        assert reconciler.seen == set()
        metrics.emit_cache_cleared.assert_called_once_with('test-session-456', 51)

    def test_remove_from_cache(self, reconciler):
        """Test removal reports whether the text was cached."""
        reconciler.mark_processed('the weather is nice')

        assert reconciler.remove_from_cache('The weather is nice') is True
        assert reconciler.remove_from_cache('The weather is nice') is False
        assert reconciler.size() == 0

    def test_clear_cache(self, reconciler):
        """Test that clear_cache empties the cache."""
        reconciler.mark_processed('one')
        reconciler.mark_processed('two')

        reconciler.clear_cache()

        assert reconciler.seen == set()

    def test_seen_is_a_copy(self, reconciler):
        """Test that mutating the returned set does not touch the cache."""
        reconciler.mark_processed('one')

        reconciler.seen.add('two')

        assert reconciler.seen == {'one'}

    def test_near_capacity_and_stats(self):
        """Test capacity reporting."""
        reconciler = DuplicateReconciler(config=ReconcilerConfig(max_cache_size=10))

        for i in range(8):
            reconciler.mark_processed(f'text {i}')

        assert reconciler.is_near_capacity() is False

        reconciler.mark_processed('text 8')

        stats = reconciler.get_cache_stats()
        assert reconciler.is_near_capacity() is True
        assert stats['size'] == 9
        assert stats['max_size'] == 10
        assert stats['utilization'] == pytest.approx(0.9)
        assert stats['near_capacity'] is True
        assert len(stats['sample_entries']) == 5
