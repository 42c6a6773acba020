"""Test suite for the vet-scheduling package."""
