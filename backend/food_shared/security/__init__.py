"""
Security: token verification and the authenticated Principal.
"""
