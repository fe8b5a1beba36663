"""
HTTP API (Flask + flasgger)
"""
