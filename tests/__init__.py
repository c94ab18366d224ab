"""Tests for the Houseplant Manager integration."""
