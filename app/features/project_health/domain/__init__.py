"""
Domain subpackage for project health.
"""
