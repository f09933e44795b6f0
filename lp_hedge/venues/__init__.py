"""Venue adapters. Import the concrete modules directly; each pulls in its SDK."""
