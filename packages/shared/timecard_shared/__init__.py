"""Schemas shared between the Timecard server and its clients."""
