"""Test suite for virus_genealogy."""
