"""Bounded-concurrency HTTP download scheduler with sidecar identity markers."""

__version__ = "0.1.0"
