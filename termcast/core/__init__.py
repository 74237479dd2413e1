"""
Core package providing terms, types and casts.

Architecture:
- Term carries exactly one Multiplicity, tagged Just/Unjust and Mutable/Immutable
- Type is a namespaced descriptor holding child Types and outbound casts
- Operation and Cast transform Terms; Instance binds a Type to a Term

Cross-cutting:
- Structured error hierarchy rooted at TermcastError
- Expected failures are data (Unjust Terms); misuse raises
"""
