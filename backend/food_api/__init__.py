"""
Food ordering REST API.
"""
