"""
Infrastructure shared by every service: configuration, logging,
persistence, security and the domain error types.
"""
