"""
Models module - domain entities shared by services and stores.

See entities.py; API request/response shapes live in schemas/.
"""
