"""Typed asynchronous client layer for the PagerDuty REST API."""
