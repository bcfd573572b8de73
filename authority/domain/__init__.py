"""Domain layer: entities, ports (protocols), errors and validators.

Pure business rules with no infrastructure dependencies.
"""
