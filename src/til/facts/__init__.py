"""Fact records and vote types."""

from .models import Fact, VoteType

__all__ = ["Fact", "VoteType"]
