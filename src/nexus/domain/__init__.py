"""Nexus domain: records, merge rules and the ingestion pipeline.

The domain stays adapter-free: language-model calls, document decoding and
persistence are reached only through the protocols in :mod:`nexus.domain.ports`.
"""

from __future__ import annotations
