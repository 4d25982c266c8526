"""
Services: domain logic, authorization and read projections.
"""
