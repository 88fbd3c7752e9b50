"""Orchestration over the router: lookups, match lists, the football-data proxy."""
