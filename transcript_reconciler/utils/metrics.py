"""
Metrics utilities for transcript reconciliation.

This module provides utilities for emitting metrics that track sentence
emission, duplicate suppression and cache behavior per session.
"""

import logging
from typing import Dict, List

logger = logging.getLogger(__name__)


class MetricsEmitter:
    """
    Emits reconciliation metrics.

    Metrics are logged in a structured "METRIC name=value" line that log
    pipelines can parse, and buffered until flush_metrics() is called.
    """

    def __init__(self, namespace: str = 'TranscriptReconciliation/Sessions'):
        """
        Initialize metrics emitter.

        Args:
            namespace: Namespace recorded with every metric
        """
        self.namespace = namespace
        self.metrics_buffer: List[Dict] = []

    def emit_sentence_emitted(self, session_id: str, reason: str) -> None:
        """
        Emit metric for a sentence accepted downstream.

        Args:
            session_id: Session identifier
            reason: Trigger label of the sentence
        """
        self._emit_metric({
            'namespace': self.namespace,
            'metric_name': 'SentencesEmitted',
            'value': 1,
            'unit': 'Count',
            'dimensions': {
                'SessionId': session_id,
                'Reason': reason
            }
        })

    def emit_duplicate_suppressed(self, session_id: str, detection_type: str) -> None:
        """
        Emit metric for a candidate dropped as duplicate.

        Args:
            session_id: Session identifier
            detection_type: Which duplicate kind matched
        """
        self._emit_metric({
            'namespace': self.namespace,
            'metric_name': 'DuplicatesSuppressed',
            'value': 1,
            'unit': 'Count',
            'dimensions': {
                'SessionId': session_id,
                'DetectionType': detection_type
            }
        })

    def emit_expansion_replaced(self, session_id: str, similarity: float) -> None:
        """
        Emit metric for an emitted text replaced by its expansion.

        Args:
            session_id: Session identifier
            similarity: Word-set similarity of old and new text
        """
        self._emit_metric({
            'namespace': self.namespace,
            'metric_name': 'ExpansionsReplaced',
            'value': similarity,
            'unit': 'None',
            'dimensions': {
                'SessionId': session_id
            }
        })

    def emit_replacement_discrepancy(self, session_id: str, discrepancy_pct: float) -> None:
        """
        Emit metric for the edit distance between replaced and replacing text.

        Args:
            session_id: Session identifier
            discrepancy_pct: Edit distance as a percentage of the longer text
        """
        self._emit_metric({
            'namespace': self.namespace,
            'metric_name': 'ReplacementDiscrepancy',
            'value': discrepancy_pct,
            'unit': 'Percent',
            'dimensions': {
                'SessionId': session_id
            }
        })

    def emit_cache_cleared(self, session_id: str, entries: int) -> None:
        """
        Emit metric for a full reconciliation cache clear.

        Args:
            session_id: Session identifier
            entries: Number of entries dropped
        """
        if entries > 0:
            self._emit_metric({
                'namespace': self.namespace,
                'metric_name': 'CacheCleared',
                'value': entries,
                'unit': 'Count',
                'dimensions': {
                    'SessionId': session_id
                }
            })

    def emit_processing_latency(self, session_id: str, latency_ms: float) -> None:
        """
        Emit metric for per-event processing latency.

        Args:
            session_id: Session identifier
            latency_ms: Processing latency in milliseconds
        """
        self._emit_metric({
            'namespace': self.namespace,
            'metric_name': 'ProcessingLatency',
            'value': latency_ms,
            'unit': 'Milliseconds',
            'dimensions': {
                'SessionId': session_id
            }
        })

    def _emit_metric(self, metric: dict) -> None:
        """
        Log metric in structured format and buffer it.

        Args:
            metric: Metric dictionary
        """
        logger.info(
            f"METRIC {metric['metric_name']}={metric['value']} "
            f"unit={metric['unit']} "
            f"dimensions={metric['dimensions']}"
        )

        self.metrics_buffer.append(metric)

    def flush_metrics(self) -> List[Dict]:
        """
        Flush buffered metrics.

        Returns:
            The metrics that were buffered
        """
        flushed = self.metrics_buffer
        if flushed:
            logger.debug(f"Flushing {len(flushed)} metrics")

        self.metrics_buffer = []
        return flushed
