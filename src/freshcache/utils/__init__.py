"""Utility helpers for freshcache."""
