"""
Utilities: exceptions, validators and schemas.
"""
