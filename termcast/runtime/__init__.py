"""
Runtime package: the typing environment and its supporting machinery.

Architecture:
- TypingEnvironment owns the namespace tree and the cast table
- PendingResult backs Blocking Terms with bounded, cancellable waits
- HookManager dispatches environment events to observers
- Concurrency primitives guard every mutation path
"""
