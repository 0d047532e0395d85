"""Test doubles for oci-labels."""
