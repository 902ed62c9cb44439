"""Routing: an ordered route table with first-registered-wins matching.

Routes are declared on controllers, flattened into an immutable table
when the router is built, and scanned linearly in registration order.
"""
