"""Hashing, currency and record key helpers."""
