"""Pitch deck builder API."""
