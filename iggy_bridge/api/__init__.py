"""Aggregate REST sub-routers."""
