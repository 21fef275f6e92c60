"""
Unit tests for configuration models and environment loading.
"""

import pytest
from transcript_reconciler.exceptions import ConfigurationError
from transcript_reconciler.models import ReconcilerConfig, ScannerConfig, SessionConfig
from transcript_reconciler.services.stream_orchestrator import load_config_from_environment


class TestScannerConfig:
    """Test suite for ScannerConfig."""

    def test_defaults(self):
        """Test default scanner values."""
        config = ScannerConfig()

        assert config.min_sentence_length == 1
        assert config.duplicate_suppression_window_seconds == 0.5
        assert config.revision_strategy == 'common_prefix'
        assert config.max_remainder_length == 0
        assert 'Dr.' in config.abbreviations
        assert isinstance(config.false_terminator_patterns, tuple)

    def test_tables_are_converted_to_tuples(self):
        """Test that list tables are stored as tuples."""
        config = ScannerConfig(abbreviations=['Dr.'], false_terminator_patterns=[('x', 'x')])

        assert config.abbreviations == ('Dr.',)
        assert config.false_terminator_patterns == (('x', 'x'),)

    def test_conservative_profile(self):
        """Test the conservative profile and its overrides."""
        config = ScannerConfig.conservative(revision_strategy='full_text')

        assert config.min_sentence_length == 15
        assert config.duplicate_suppression_window_seconds == 1.0
        assert config.revision_strategy == 'full_text'

    @pytest.mark.parametrize('kwargs,message', [
        ({'min_sentence_length': 0}, 'min_sentence_length must be at least 1'),
        ({'duplicate_suppression_window_seconds': -0.1}, 'duplicate_suppression_window_seconds must be non-negative'),
        ({'max_remainder_length': -1}, 'max_remainder_length must be non-negative'),
        ({'revision_strategy': 'diff'}, 'revision_strategy must be one of'),
    ])
    def test_invalid_values_rejected(self, kwargs, message):
        """Test field validation on construction."""
        with pytest.raises(ConfigurationError, match=message):
            ScannerConfig(**kwargs)


class TestReconcilerConfig:
    """Test suite for ReconcilerConfig."""

    def test_defaults(self):
        """Test default reconciler thresholds."""
        config = ReconcilerConfig()

        assert config.similarity_threshold == 0.85
        assert config.max_length_difference_ratio == 0.1
        assert config.min_expansion_ratio == 1.1
        assert config.max_cache_size == 50

    @pytest.mark.parametrize('kwargs,message', [
        ({'similarity_threshold': 0.0}, 'similarity_threshold must be between'),
        ({'similarity_threshold': 1.5}, 'similarity_threshold must be between'),
        ({'max_length_difference_ratio': -0.1}, 'max_length_difference_ratio must be between'),
        ({'min_expansion_ratio': 1.0}, 'min_expansion_ratio must be greater than 1.0'),
        ({'max_cache_size': 0}, 'max_cache_size must be at least 1'),
        ({'min_text_length': 0}, 'min_text_length must be at least 1'),
        ({'min_text_length': 10, 'max_text_length': 5}, 'max_text_length must be at least min_text_length'),
    ])
    def test_invalid_values_rejected(self, kwargs, message):
        """Test field validation on construction."""
        with pytest.raises(ConfigurationError, match=message):
            ReconcilerConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        """Test that callers can catch ValueError."""
        with pytest.raises(ValueError):
            ReconcilerConfig(max_cache_size=-1)


class TestSessionConfig:
    """Test suite for SessionConfig."""

    def test_defaults(self):
        """Test default session values."""
        config = SessionConfig()

        assert config.discrepancy_threshold == 20.0
        assert config.idle_finalize_seconds is None
        assert config.idle_check_interval_seconds == 0.5
        assert config.emission_queue_size == 0

    @pytest.mark.parametrize('kwargs,message', [
        ({'discrepancy_threshold': 120.0}, 'discrepancy_threshold must be between 0 and 100'),
        ({'idle_finalize_seconds': 0.0}, 'idle_finalize_seconds must be positive'),
        ({'idle_check_interval_seconds': 0.0}, 'idle_check_interval_seconds must be positive'),
        ({'emission_queue_size': -1}, 'emission_queue_size must be non-negative'),
    ])
    def test_invalid_values_rejected(self, kwargs, message):
        """Test field validation on construction."""
        with pytest.raises(ConfigurationError, match=message):
            SessionConfig(**kwargs)


class TestLoadConfigFromEnvironment:
    """Test suite for environment configuration loading."""

    def test_defaults_without_environment(self, monkeypatch):
        """Test that unset variables fall back to defaults."""
        for name in (
            'MIN_SENTENCE_LENGTH', 'DUPLICATE_SUPPRESSION_WINDOW', 'REVISION_STRATEGY',
            'MAX_REMAINDER_LENGTH', 'SIMILARITY_THRESHOLD', 'MAX_LENGTH_DIFFERENCE_RATIO',
            'MIN_EXPANSION_RATIO', 'MAX_CACHE_SIZE', 'DISCREPANCY_THRESHOLD',
            'IDLE_FINALIZE_SECONDS', 'IDLE_CHECK_INTERVAL'
        ):
            monkeypatch.delenv(name, raising=False)

        config = load_config_from_environment()

        assert config == SessionConfig()

    def test_reads_environment(self, monkeypatch):
        """Test that every variable is applied."""
        monkeypatch.setenv('MIN_SENTENCE_LENGTH', '5')
        monkeypatch.setenv('DUPLICATE_SUPPRESSION_WINDOW', '2.0')
        monkeypatch.setenv('REVISION_STRATEGY', 'full_text')
        monkeypatch.setenv('SIMILARITY_THRESHOLD', '0.9')
        monkeypatch.setenv('MAX_CACHE_SIZE', '100')
        monkeypatch.setenv('IDLE_FINALIZE_SECONDS', '3.5')
        monkeypatch.setenv('IDLE_CHECK_INTERVAL', '0.25')

        config = load_config_from_environment()

        assert config.scanner.min_sentence_length == 5
        assert config.scanner.duplicate_suppression_window_seconds == 2.0
        assert config.scanner.revision_strategy == 'full_text'
        assert config.reconciler.similarity_threshold == 0.9
        assert config.reconciler.max_cache_size == 100
        assert config.idle_finalize_seconds == 3.5
        assert config.idle_check_interval_seconds == 0.25

    def test_invalid_environment_value(self, monkeypatch):
        """Test that out-of-range values are rejected."""
        monkeypatch.setenv('MAX_CACHE_SIZE', '0')

        with pytest.raises(ConfigurationError):
            load_config_from_environment()
