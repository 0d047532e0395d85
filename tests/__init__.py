"""Tests for oci-labels."""
