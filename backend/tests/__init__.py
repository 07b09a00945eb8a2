"""Test suite for algo_revise."""
