"""Authentication and authorization.

Two gates, run in order by a GuardChain:
1. AuthGuard → verifies the gateway token header, yields an Identity
2. ProjectGuard → checks the Identity owns the project in the path

Message passwords are a separate, per-message secret checked by the
message service with the CredentialVerifier.
"""
