"""Business logic services.

- schedule: rule parsing, dependency graph, layout and step replay
- rules_store: plain-text storage for rule files
"""
