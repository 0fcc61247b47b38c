"""Adapters connecting the domain ports to language models, files and storage."""

from __future__ import annotations
