"""Core habit services: dates, store, aggregation, navigation and rollover."""
