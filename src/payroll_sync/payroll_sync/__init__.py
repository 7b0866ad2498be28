"""Sync and migration engine for the payroll record store."""
