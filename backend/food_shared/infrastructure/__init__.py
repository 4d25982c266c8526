"""
Infrastructure: database engine, sessions and transactions.
"""
