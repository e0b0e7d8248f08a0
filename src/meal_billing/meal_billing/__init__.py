"""Meal Billing package.

Feature modules (settings, membership, attendance, billing) with a thin Flask
controller layer over service/repository layers. Policy values are versioned
by effective date so past bills stay reproducible.
"""
