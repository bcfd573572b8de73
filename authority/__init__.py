"""Authority: authentication token and session lifecycle.

Issues, rotates, revokes and expires the credentials that let a client prove
its identity across requests without resending a password.

Usage:
    from authority.core.container import create_in_memory_orchestrator

    auth = create_in_memory_orchestrator()
    result = await auth.login(LoginUser(identifier="a@x.com", password="..."))
"""

__version__ = "0.1.0"
