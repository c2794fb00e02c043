"""Shared DRF plumbing: pagination and query-parameter ordering."""
